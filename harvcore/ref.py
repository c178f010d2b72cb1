"""Steve API identifiers and the owned-by annotation of resources."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from harvcore.objects import GroupKind

ANNOTATION_SCHEMA_OWNER_KEY_NAME = "harvester.cattle.io/owned-by"


def parse(ref: str) -> tuple[str, str]:
    """Split a steve API ID into (namespace, name)."""
    namespace, sep, name = ref.partition("/")
    if not sep:
        return "", ref
    return namespace, name


def construct(namespace: str, name: str) -> str:
    """Build a steve API ID from a namespace and a name."""
    if not namespace:
        return name
    return f"{namespace}/{name}"


def group_kind_to_schema_id(kind: GroupKind) -> str:
    """Translate a GroupKind into a steve schema ID."""
    return f"{kind.group}.{kind.kind}".lower()


def _meta(obj):
    return getattr(obj, "metadata", obj)


def _owner_ref(owner) -> str:
    meta = _meta(owner)
    return construct(meta.namespace, meta.name)


@dataclass
class AnnotationSchemaReference:
    """The owners sharing one schema ID."""

    schema_id: str
    references: set[str] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {"schema": self.schema_id, "refs": sorted(self.references)}

    @classmethod
    def from_dict(cls, data) -> AnnotationSchemaReference:
        if not isinstance(data, dict):
            raise ValueError(f"schema reference must be an object, got {data!r}")
        schema_id = data.get("schema")
        if schema_id is None:
            schema_id = ""
        refs = data.get("refs")
        if refs is None:
            refs = []
        if not isinstance(schema_id, str):
            raise ValueError(f"schema must be a string, got {schema_id!r}")
        if not isinstance(refs, list) or not all(isinstance(item, str) for item in refs):
            raise ValueError(f"refs must be a list of strings, got {refs!r}")
        return cls(schema_id, set(refs))


class AnnotationSchemaOwners(dict):
    """Owners recorded in the owned-by annotation, keyed by schema ID."""

    def __str__(self) -> str:
        return self.to_json()

    def to_json(self) -> str:
        refs = sorted(self.values(), key=lambda ref: ref.schema_id)
        return json.dumps([ref.to_dict() for ref in refs], separators=(",", ":"))

    @classmethod
    def from_json(cls, text) -> AnnotationSchemaOwners:
        data = json.loads(text)
        owners = cls()
        if data is None:
            return owners
        if not isinstance(data, list):
            raise ValueError(f"schema owners must be a list, got {data!r}")
        for item in data:
            ref = AnnotationSchemaReference.from_dict(item)
            if not ref.schema_id:
                continue
            existing = owners.get(ref.schema_id)
            if existing is None:
                owners[ref.schema_id] = ref
            else:
                existing.references.update(ref.references)
        return owners

    def list(self, owner_gk: GroupKind) -> list[str]:
        """Return the owner IDs recorded under the given group kind."""
        schema_id = group_kind_to_schema_id(owner_gk)
        schema_ref = self.get(schema_id)
        if schema_ref is None or schema_ref.schema_id != schema_id:
            return []
        return sorted(schema_ref.references)

    def has(self, owner_gk: GroupKind, owner) -> bool:
        """Tell whether the given owner is recorded."""
        schema_id = group_kind_to_schema_id(owner_gk)
        schema_ref = self.get(schema_id)
        if schema_ref is None:
            return False
        return schema_ref.schema_id == schema_id and _owner_ref(owner) in schema_ref.references

    def add(self, owner_gk: GroupKind, owner) -> bool:
        """Record the owner; return False if it was already recorded."""
        if self.has(owner_gk, owner):
            return False
        schema_id = group_kind_to_schema_id(owner_gk)
        schema_ref = self.get(schema_id)
        if schema_ref is None:
            schema_ref = AnnotationSchemaReference(schema_id)
        schema_ref.references.add(_owner_ref(owner))
        self[schema_id] = schema_ref
        return True

    def remove(self, owner_gk: GroupKind, owner) -> bool:
        """Drop the owner; return False if it was not recorded."""
        if not self.has(owner_gk, owner):
            return False
        schema_id = group_kind_to_schema_id(owner_gk)
        schema_ref = self[schema_id]
        schema_ref.references.discard(_owner_ref(owner))
        if not schema_ref.references:
            del self[schema_id]
        return True

    def bind(self, obj) -> None:
        """Write these owners into the object's annotations."""
        meta = _meta(obj)
        annotations = dict(meta.annotations or {})
        if self:
            annotations[ANNOTATION_SCHEMA_OWNER_KEY_NAME] = self.to_json()
        else:
            annotations.pop(ANNOTATION_SCHEMA_OWNER_KEY_NAME, None)
        meta.annotations = annotations or None


def get_schema_owners_from_annotation(obj) -> AnnotationSchemaOwners:
    """Read the schema owners from the object's owned-by annotation."""
    annotations = _meta(obj).annotations or {}
    text = annotations.get(ANNOTATION_SCHEMA_OWNER_KEY_NAME)
    if text is None:
        return AnnotationSchemaOwners()
    try:
        return AnnotationSchemaOwners.from_json(text)
    except ValueError as err:
        raise ValueError(f"failed to unmarshal annotation schema owners: {err}") from err