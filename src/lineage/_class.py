"""Class templates and the factory that creates them"""

import logging
import types
from collections.abc import Mapping

import lineage


__all__ = ["Class", "Factory", "root", "create"]

logger = logging.getLogger(__name__)


class Factory:
    """Root of a family of Classes.

    The capability flags are fixed when the factory is built and every
    Class created from it, or from one of its descendants, carries the
    same flags.

    Args:
        tracks_instances: (bool) Classes keep an InstanceRegistry and
            instances get an id and a dispose() method
        is_eventable: (bool) Instances get on(), un() and fire()
    """

    __slots__ = ("_tracks_instances", "_is_eventable")

    def __init__(self, tracks_instances=False, is_eventable=False):
        self._tracks_instances = bool(tracks_instances)
        self._is_eventable = bool(is_eventable)

    def __repr__(self):
        return f"Factory<tracks_instances={self._tracks_instances} is_eventable={self._is_eventable}>"

    @property
    def tracks_instances(self):
        """(bool) Classes from this factory track their instances."""
        return self._tracks_instances

    @property
    def is_eventable(self):
        """(bool) Instances from this factory can publish events."""
        return self._is_eventable

    def capabilities(self):
        """Methods every Class from this factory inherits at the root.

        Returns:
            (dict) {name: callable} taking the instance as first argument
        """
        methods = dict(lineage.CORE_METHODS)
        if self._tracks_instances:
            methods.update(lineage.REGISTRY_METHODS)
        if self._is_eventable:
            methods.update(lineage.EVENT_METHODS)
        return methods

    def create(self, parent=None, methods=None, *, name=None):
        """Create a new Class.

        The parent is optional. When the first argument is not a Class it
        is taken as the method table, so create(methods) and
        create(parent, methods) both work.

        Args:
            parent: (Class | None) Class to inherit from
            methods: (Mapping | None) {name: callable | Direct | WithOverride | dict}
            name: (str | None) Name used in reprs

        Returns:
            (Class) The new Class

        Raises:
            ConfigError: If a method entry is malformed
            UsageError: If parent is not a Class
        """
        if methods is None and parent is not None and not isinstance(parent, Class):
            parent, methods = None, parent
        if parent is not None and not isinstance(parent, Class):
            raise lineage.UsageError(f"Parent must be a Class, got {type(parent).__name__}")
        return self._build(parent, methods, name)

    def _build(self, parent, methods, name):
        if methods is None:
            methods = {}
        elif not isinstance(methods, Mapping):
            raise lineage.ConfigError(f"Method table must be a mapping, got {type(methods).__name__}")
        cls = Class(self, parent, methods, name)
        logger.debug(f"Created {cls!r} from {parent!r} with methods {sorted(methods)}")
        return cls


class Class:
    """A constructible template with a chained method table.

    Calling the Class constructs an Instance. Arguments are passed to the
    init method found through the chain, or copied onto the instance as
    fields when no Class defines init.

    Args:
        factory: (Factory) Factory whose flags this Class carries
        parent: (Class | None) Class to inherit from
        methods: (Mapping) Own method table entries
        name: (str | None) Name used in reprs

    Attributes:
        name: (str) Name used in reprs
        parent: (Class | None) Parent Class, not owned
        factory: (Factory) Factory whose flags this Class carries
        tracks_instances: (bool) Instances are registered in registry
        is_eventable: (bool) Instances have the event methods
        registry: (InstanceRegistry | None) Live instances when tracking
    """

    __slots__ = (
        "name",
        "parent",
        "factory",
        "tracks_instances",
        "is_eventable",
        "registry",
        "_methods",
        "_capabilities",
    )

    def __init__(self, factory, parent, methods, name=None):
        self.name = name or "anonymous"
        self.parent = parent
        self.factory = factory
        self.tracks_instances = factory.tracks_instances
        self.is_eventable = factory.is_eventable
        self.registry = lineage.InstanceRegistry(self) if self.tracks_instances else None
        self._capabilities = factory.capabilities()

        self._methods = {}
        for key, entry in methods.items():
            spec = lineage.method_spec(key, entry)
            self._methods[key] = lineage.chain_method(spec, self._inherited(key))

    def __repr__(self):
        return f"Class<{self.name}>"

    def __call__(self, *args, **kwargs):
        ident = None
        if self.registry is not None:
            ident = self.registry.assign_id()
        instance = lineage.Instance(self, ident)
        if ident is not None:
            self.registry.register(ident, instance)

        initializer = self.lookup("init") or lineage._instance.default_init
        try:
            initializer(instance, *args, **kwargs)
        except Exception:
            if ident is not None:
                self.registry.remove(ident)
            raise
        return instance

    @property
    def methods(self):
        """(Mapping) Read-only view of this Class's own method table."""
        return types.MappingProxyType(self._methods)

    def lookup(self, name):
        """Find a method through this Class, its ancestors, then capabilities.

        Only this Class's capabilities are consulted, so the flags of
        ancestors created by another Factory never leak into it.

        Returns:
            (callable | None) Method taking the instance as first argument
        """
        method = self._user_lookup(name)
        if method is None:
            method = self._capabilities.get(name)
        return method

    def _user_lookup(self, name):
        cls = self
        while cls is not None:
            method = cls._methods.get(name)
            if method is not None:
                return method
            cls = cls.parent
        return None

    def _inherited(self, name):
        method = None
        if self.parent is not None:
            method = self.parent._user_lookup(name)
        if method is None:
            method = self._capabilities.get(name)
        return method

    def ancestors(self):
        """Iterate parent Classes, nearest first."""
        parent = self.parent
        while parent is not None:
            yield parent
            parent = parent.parent

    def derives_from(self, other):
        """(bool) Whether other is an ancestor of this Class."""
        return any(parent is other for parent in self.ancestors())

    def create(self, methods=None, *extra, name=None, parent=None):
        """Create a subclass of this Class.

        Args:
            methods: (Mapping | None) Method table for the subclass
            name: (str | None) Name used in reprs

        Returns:
            (Class) The new Class

        Raises:
            UsageError: If an explicit parent is passed, positionally or as
                the parent keyword
            ConfigError: If a method entry is malformed
        """
        if extra or parent is not None or isinstance(methods, Class):
            raise lineage.UsageError(
                f"{self!r}.create() takes only a method table, the parent is always {self!r}"
            )
        return self.factory._build(self, methods, name)

    def init(self, config=None):
        """Construct an instance from a single config value."""
        if config is None:
            return self()
        return self(config)

    def all(self):
        """(Mapping) Read-only live view of {id: instance}."""
        return self._tracking().all()

    def find(self, ident):
        """(Instance | None) Live instance with the given id."""
        return self._tracking().lookup(ident)

    def remove(self, ident):
        """Stop tracking the instance with the given id.

        Returns:
            (Instance | None) The removed instance
        """
        return self._tracking().remove(ident)

    def _tracking(self):
        if self.registry is None:
            raise lineage.UsageError(f"{self!r} does not track instances")
        return self.registry


root = Factory()
create = root.create
