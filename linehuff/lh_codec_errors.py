class CodecError(ValueError):
    """Base class for every data-validity failure raised by the codec."""


class EmptyInputError(CodecError):
    pass


class MissingCodeError(CodecError):
    def __init__(self, token):
        super().__init__(f"No code for token {token!r} (frequency strategy and tokenizer disagree)")
        self.token = token

    def __reduce__(self):
        # rebuilt from the token when crossing a process pool boundary
        return type(self), (self.token,)


class TruncatedCodeError(CodecError):
    pass


class InvalidCodeError(CodecError):
    pass


class SerializationError(CodecError):
    pass
