from sceneframe.utils import is_real, is_vector3


class TransformError(Exception):
    """Base class for errors raised by sceneframe."""


class InvalidArgumentsError(TransformError, TypeError, ValueError):
    """
    The dynamic constructor received an argument shape that matches none of
    the recognized overloads. No Transform is produced.
    """

    def __init__(self, args: tuple):
        self.received = tuple(_kind_name(a) for a in args)
        kinds = ", ".join(self.received) or "nothing"
        super().__init__(f"Invalid arguments to constructor: got ({kinds})")


def _kind_name(value) -> str:
    if is_vector3(value):
        return "Vector3"
    if is_real(value):
        return "number"
    if value is None:
        return "nil"
    return type(value).__name__
