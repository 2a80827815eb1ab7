from inspect import isclass
from typing import Any, TypeGuard, TypeVar, get_origin

# A TypeVar bound to classes.
T = TypeVar("T", bound=type)


def is_class_and_subclass(value: Any, _type: T | tuple[T, ...]) -> TypeGuard[T]:
    """
    Checks if `value` is both a class and a subclass of `_type` (or one of the
    types of a tuple).

    Used where a value may be a factory class, a factory instance, a string
    that still has to be loaded or anything else a user passed in by mistake.
    Generic aliases (`list[int]`) are checked through their origin.

    Parameters:
        value (Any): The value to check. A class, an instance, a generic
            alias or any other object.
        _type (T | tuple[T, ...]): The class (or classes) `value` must derive
            from.

    Returns:
        TypeGuard[T]: `True` if `value` is a class deriving from `_type`,
            `False` otherwise, including for instances.

    Examples:
        ```python
        assert is_class_and_subclass(CityFactory, Factory)
        assert not is_class_and_subclass(CityFactory(), Factory)
        assert is_class_and_subclass(list[str], list)
        ```
    """
    # `get_origin` returns `list` for `list[int]` and `None` for plain classes.
    original = get_origin(value)

    if not original and not isclass(value):
        return False

    try:
        if original:
            return issubclass(original, _type)
        return issubclass(value, _type)
    except TypeError:
        # not a type after all
        return False
