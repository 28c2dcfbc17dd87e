"""
Decorators for handing a seeded mock external context to test functions.
"""

import difflib
import functools
import inspect
from typing import Any, Callable, List

from .errors import ConfigurationError
from .mock import MockExternalContext
from .types import Handler

# Keyword fields that are not plain property assignments
_SPECIAL_FIELDS = ("parameters", "event_id")


def settable_fields() -> List[str]:
    """Names that may be passed to seed_context / with_external_context."""
    names = [
        name for name, attr in vars(MockExternalContext).items()
        if isinstance(attr, property) and attr.fset is not None
    ]
    return sorted(names + list(_SPECIAL_FIELDS))


def seed_context(ctx: MockExternalContext, **fields: Any) -> MockExternalContext:
    """
    Assign fields onto an existing context through its setters.

    ``parameters`` is a mapping put into the request parameters one by one,
    ``event_id`` goes through set_event_id; everything else must name a
    settable property such as ``context_path`` or ``current_user``.
    """
    allowed = settable_fields()
    for name, value in fields.items():
        if name not in allowed:
            error = ConfigurationError(f"MockExternalContext has no settable field '{name}'", field=name)
            for match in difflib.get_close_matches(name, allowed, n=1):
                error.add_suggestion(f"Use '{match}' instead of '{name}'")
            raise error
        if name == "parameters":
            for parameter_name, parameter_value in value.items():
                ctx.put_request_parameter(parameter_name, parameter_value)
        elif name == "event_id":
            ctx.set_event_id(value)
        else:
            setattr(ctx, name, value)
    return ctx


def with_external_context(**fields: Any) -> Callable[[Handler], Handler]:
    """
    Decorator to inject a seeded MockExternalContext as the first argument.

    Example:
        @with_external_context(current_user="keith", parameters={"page": "2"})
        def test_paging(ctx):
            assert ctx.request_parameter_map.get("page") == "2"

    When the decorated function is already called with a context, that
    context is seeded instead of a new one being built. Meant for plain
    functions: on a method the context would land in ``self``'s slot.
    """
    def _prepare(args: tuple) -> tuple:
        if args and isinstance(args[0], MockExternalContext):
            seed_context(args[0], **fields)
            return args
        ctx = seed_context(MockExternalContext(), **fields)
        return (ctx,) + args

    def decorator(func: Handler) -> Handler:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def wrapper(*args: Any, **kw: Any) -> Any:
                return await func(*_prepare(args), **kw)
        else:
            @functools.wraps(func)
            def wrapper(*args: Any, **kw: Any) -> Any:
                return func(*_prepare(args), **kw)

        # Hide the injected context so pytest does not look for a fixture with its name
        signature = inspect.signature(func)
        wrapper.__signature__ = signature.replace(
            parameters=list(signature.parameters.values())[1:]
        )
        return wrapper
    return decorator
