"""Type configs and the per-graph type registries.

A ``TypeConfig`` is the immutable, validated form of one registered node
type, edge relation or graph type. A ``TypeRegistry`` maps tags (the node
``type`` / edge ``relation`` strings) to configs and always holds an entry
for the empty tag, which every unknown tag falls back to.

Registrations accept these shapes:
    - a ``TypeDescriptor`` of the registry's kind (``NodeType(...)``)
    - a mapping, validated into the kind's descriptor model
    - a class whose ``entity_kind`` matches and that carries a
      ``type_descriptor`` (``BoundNode`` / ``BoundEdge`` / ``Hypergraph``
      subclasses)
    - an instance of such a class, which registers its class
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from hypermeta.engine.schema import sanitize_metadata
from hypermeta.exceptions import InvalidTypeDescriptorError
from hypermeta.models import DESCRIPTOR_MODELS, EntityKind, FieldSpec, TypeDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TAG = ""

_DEFAULT_TYPE_NAMES = {
    EntityKind.GRAPH: "Graph",
    EntityKind.NODE: "Node",
    EntityKind.EDGE: "Edge",
}


def _coerce_descriptor(kind: EntityKind, descriptor: Any) -> tuple[TypeDescriptor, type | None]:
    """Turn a registration argument into a descriptor of ``kind``.

    Returns:
        Tuple of (descriptor, bound_class); bound_class is None unless a
        class was registered.

    Raises:
        InvalidTypeDescriptorError: If the argument does not identify as ``kind``
    """
    if isinstance(descriptor, type):
        if getattr(descriptor, "entity_kind", None) != kind:
            raise InvalidTypeDescriptorError(
                f"{descriptor.__name__} must be a {kind.value} class "
                f"(entity_kind={kind.value!r})"
            )
        inner = getattr(descriptor, "type_descriptor", None)
        model, _ = _coerce_descriptor(kind, inner if inner is not None else {})
        return model, descriptor

    if isinstance(descriptor, TypeDescriptor):
        if descriptor.kind != kind:
            raise InvalidTypeDescriptorError(
                f"Expected a {kind.value} descriptor, got a {descriptor.kind.value} descriptor"
            )
        return descriptor, None

    if isinstance(descriptor, Mapping):
        data = dict(descriptor)
        declared = data.pop("kind", kind)
        try:
            declared_kind = EntityKind(declared)
        except ValueError:
            raise InvalidTypeDescriptorError(f"Unknown descriptor kind: {declared!r}") from None
        if declared_kind != kind:
            raise InvalidTypeDescriptorError(
                f"Expected a {kind.value} descriptor, got a {declared_kind.value} descriptor"
            )
        try:
            return DESCRIPTOR_MODELS[kind].model_validate(data), None
        except ValidationError as exc:
            raise InvalidTypeDescriptorError(f"Invalid {kind.value} descriptor: {exc}") from exc

    # bound node/edge instances register their class
    if getattr(type(descriptor), "entity_kind", None) is not None:
        return _coerce_descriptor(kind, type(descriptor))

    raise InvalidTypeDescriptorError(
        f"Expected a {kind.value} type descriptor, got {type(descriptor).__name__}"
    )


@dataclass(frozen=True)
class TypeConfig:
    """Validated configuration for one node type, edge relation or graph type.

    Attributes:
        kind: Entity kind this config validates
        version: Descriptor version string
        schema: Read-only mapping of field name -> FieldSpec
        strict: Whether undeclared metadata keys are dropped on write
        type_name: Display name (class name, descriptor name or tag)
        bound_class: Class registered for the tag, if a class was registered
    """

    kind: EntityKind
    version: str
    schema: Mapping[str, FieldSpec]
    strict: bool
    type_name: str
    bound_class: type | None = None

    @classmethod
    def from_descriptor(
        cls,
        kind: EntityKind,
        descriptor: Any,
        tag: str = DEFAULT_TAG,
    ) -> TypeConfig:
        """Build a config from any accepted registration shape.

        Raises:
            InvalidTypeDescriptorError: If ``descriptor`` is not of ``kind``
        """
        kind = EntityKind(kind)
        model, bound_class = _coerce_descriptor(kind, descriptor)
        if bound_class is not None:
            type_name = bound_class.__name__
        else:
            type_name = model.name or tag or _DEFAULT_TYPE_NAMES[kind]
        return cls(
            kind=kind,
            version=model.version,
            schema=MappingProxyType(dict(model.meta_schema)),
            strict=model.is_metadata_strict,
            type_name=type_name,
            bound_class=bound_class,
        )

    def sanitize(
        self,
        raw: Mapping[str, Any] | None = None,
        type_check_only: bool = False,
    ) -> dict[str, Any]:
        """Sanitize a metadata record against this config's schema.

        Entity creation passes ``type_check_only=True`` so strict schemas drop
        undeclared keys; serialization uses the default and keeps them.
        """
        return sanitize_metadata(
            self.schema,
            self.strict,
            raw,
            type_check_only=type_check_only,
            type_name=self.type_name,
        )


class TypeRegistry:
    """Tag -> TypeConfig mapping with a mandatory default entry.

    The empty tag is registered on construction and cannot be unregistered;
    ``resolve`` falls back to it for any tag that is not registered.
    """

    def __init__(self, kind: EntityKind, default: Any = None) -> None:
        self.kind = EntityKind(kind)
        self._configs: dict[str, TypeConfig] = {}
        if default is None:
            default = DESCRIPTOR_MODELS[self.kind]()
        self.register(DEFAULT_TAG, default)

    def register(self, tag: str, descriptor: Any) -> TypeConfig:
        """Register (or replace) the config for ``tag``.

        Raises:
            TypeError: If tag is not a string
            InvalidTypeDescriptorError: If descriptor is not of this registry's kind
        """
        if not isinstance(tag, str):
            raise TypeError(f"Type tag must be a string, got: {type(tag).__name__}")
        config = TypeConfig.from_descriptor(self.kind, descriptor, tag)
        if tag in self._configs:
            logger.debug("Replacing %s type %r", self.kind.value, tag)
        self._configs[tag] = config
        logger.debug(
            "Registered %s type %r as %s (strict=%s, fields=%s)",
            self.kind.value,
            tag,
            config.type_name,
            config.strict,
            list(config.schema),
        )
        return config

    def unregister(self, tag: str) -> bool:
        """Remove a registration. Returns True if it existed.

        Raises:
            ValueError: If tag is the default tag
        """
        if tag == DEFAULT_TAG:
            raise ValueError("The default type registration cannot be removed")
        return self._configs.pop(tag, None) is not None

    def get(self, tag: str) -> TypeConfig | None:
        """Exact lookup without fallback."""
        return self._configs.get(tag)

    def resolve(self, tag: str) -> TypeConfig:
        """Return the config for ``tag``, or the default config if unregistered."""
        config = self._configs.get(tag)
        if config is None:
            return self._configs[DEFAULT_TAG]
        return config

    def bound_class(self, tag: str) -> type | None:
        """Class registered for ``tag`` (with default fallback), if any."""
        return self.resolve(tag).bound_class

    def tags(self) -> list[str]:
        return list(self._configs)

    def __contains__(self, tag: object) -> bool:
        return tag in self._configs

    def __len__(self) -> int:
        return len(self._configs)

    def __repr__(self) -> str:
        return f"TypeRegistry({self.kind.value!r}, tags={self.tags()!r})"
