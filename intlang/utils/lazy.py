from typing import Any, Callable

__all__ = ["LazyProperty"]


class LazyProperty:
    """
    Decorator turning a method into a property which is computed on the first
    access and then kept on the instance, e.g. the ``site`` object or the CSRF
    token of :py:class:`intlang.client.API`.

    ``del obj.attribute`` drops the kept value, so the next access calls the
    method again. This is how an expired CSRF token is renewed. Assigning to
    the attribute replaces the kept value.
    """

    def __init__(self, func: Callable[[Any], Any]) -> None:
        self.func = func
        self.__doc__ = func.__doc__
        self.key = "_lazy_" + func.__name__

    def __set_name__(self, owner: type, name: str) -> None:
        self.key = "_lazy_" + name

    def __get__(self, instance: Any, owner: type | None = None, /) -> Any:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.key]
        except KeyError:
            value = instance.__dict__[self.key] = self.func(instance)
            return value

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self.key] = value

    def __delete__(self, instance: Any) -> None:
        instance.__dict__.pop(self.key, None)
