"""Errors raised while decoding or compiling an AST."""


class BlockastError(ValueError):
    """Base class; any of these means the whole AST is invalid."""


class UnknownNodeKindError(BlockastError):
    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unknown node kind: {kind!r}")


class MalformedNodeError(BlockastError):
    def __init__(self, kind: str, message: str):
        self.kind = kind
        super().__init__(f"Malformed {kind} node: {message}")


class TopLevelNodeError(BlockastError):
    def __init__(self, kind: str, index: int):
        self.kind = kind
        self.index = index
        super().__init__(
            f"Top-level node {index} is a {kind} node; only blocks are allowed"
        )


class ConfigError(BlockastError):
    pass
