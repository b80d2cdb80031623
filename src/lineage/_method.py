"""Method specifications and parent chaining"""

import functools
from collections.abc import Mapping

import lineage


__all__ = ["Direct", "WithOverride", "override", "method_spec", "chain_method"]


class Direct:
    """Method that composes with the parent method of the same name.

    Args:
        handler: (callable) Implementation, called as handler(instance, ...)
    """

    __slots__ = ("handler",)

    def __init__(self, handler):
        self.handler = handler

    @property
    def override(self):
        """(bool) Direct methods never override."""
        return False

    def __repr__(self):
        return f"Direct<{_handler_name(self.handler)}>"


class WithOverride:
    """Method with an explicit override flag.

    When override is true the parent method of the same name is never
    invoked automatically. It can still be reached with get_super().

    Args:
        handler: (callable) Implementation, called as handler(instance, ...)
        override: (bool) Suppress the automatic parent call
    """

    __slots__ = ("handler", "override")

    def __init__(self, handler, override=True):
        self.handler = handler
        self.override = override

    def __repr__(self):
        return f"WithOverride<{_handler_name(self.handler)} override={self.override}>"


def override(handler):
    """Mark a handler as overriding its parent method."""
    return WithOverride(handler, True)


def method_spec(name, entry):
    """Convert one method table entry into a Direct or WithOverride.

    Accepted entries are a plain callable, an existing Direct/WithOverride,
    or a mapping with a callable "handler" and an optional bool "override".

    Args:
        name: (str) Method name, used for error reporting
        entry: (object) The method table value

    Returns:
        (Direct | WithOverride) Normalized specification

    Raises:
        ConfigError: If the entry is not usable as a method
    """
    if not isinstance(name, str) or not name:
        raise lineage.ConfigError(f"Method name must be a non-empty string, got {name!r}", name)

    if isinstance(entry, (Direct, WithOverride)):
        spec = entry
    elif isinstance(entry, Mapping):
        unknown = set(entry) - {"handler", "override"}
        if unknown:
            raise lineage.ConfigError(
                f"Method '{name}' has unknown descriptor keys: {', '.join(sorted(map(str, unknown)))}",
                name,
            )
        if "handler" not in entry:
            raise lineage.ConfigError(f"Method '{name}' descriptor has no handler", name)
        flag = entry.get("override", False)
        if not isinstance(flag, bool):
            raise lineage.ConfigError(f"Method '{name}' override flag must be a bool, got {flag!r}", name)
        spec = WithOverride(entry["handler"], flag)
    elif callable(entry):
        spec = Direct(entry)
    else:
        raise lineage.ConfigError(
            f"Method '{name}' must be a callable or a handler descriptor, got {type(entry).__name__}",
            name,
        )

    if not callable(spec.handler):
        raise lineage.ConfigError(f"Method '{name}' handler is not callable", name)
    return spec


def chain_method(spec, parent_method):
    """Build the callable stored in a Class method table.

    Override methods and methods without a parent are stored as-is.
    Otherwise the result calls parent_method first with the same receiver
    and arguments, drops its result, then returns the handler's result.
    Calling it on a disposed receiver raises LifecycleError.
    The parent method may itself be a chained wrapper, so composition
    follows the whole inheritance chain.

    Args:
        spec: (Direct | WithOverride) Method specification
        parent_method: (callable | None) Inherited method of the same name

    Returns:
        (callable) Method taking the receiver as first argument
    """
    handler = spec.handler
    if spec.override or parent_method is None:
        return handler

    @functools.wraps(handler)
    def chained(receiver, *args, **kwargs):
        if getattr(receiver, "is_disposed", False):
            raise lineage.LifecycleError(f"{receiver!r} used after disposal", receiver)
        parent_method(receiver, *args, **kwargs)
        return handler(receiver, *args, **kwargs)

    chained.__chained__ = parent_method
    return chained


def _handler_name(handler):
    return getattr(handler, "__qualname__", None) or repr(handler)
