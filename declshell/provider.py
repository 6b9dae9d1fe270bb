"""Metadata provider: reads structural metadata documents into descriptors.

A metadata document is JSON (``.json``) or YAML and describes one library's
exported types. Referenced libraries listed under ``references`` are resolved
next to the primary document first, then along the configured search paths;
their types feed subtype and enum lookups but are never emitted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

import yaml

from .graph import TypeGraph
from .logging import get_logger
from .models import (
    AccessorRole,
    AttributeArgument,
    AttributeDescriptor,
    Constructor,
    Event,
    Field,
    LibraryMetadata,
    Members,
    Method,
    Parameter,
    ParameterDirection,
    Property,
    TypeCategory,
    TypeDescriptor,
    TypeKind,
    TypeReference,
)

DOCUMENT_SUFFIXES = (".json", ".yml", ".yaml")

NULLABLE_TYPE_NAME = "System.Nullable`1"

WELL_KNOWN_CATEGORIES: Dict[str, TypeCategory] = {
    "System.Void": TypeCategory.VOID,
    "System.Boolean": TypeCategory.BOOLEAN,
    "System.Char": TypeCategory.CHAR,
    "System.IntPtr": TypeCategory.NATIVE_INT,
    "System.UIntPtr": TypeCategory.NATIVE_INT,
    "System.Byte": TypeCategory.PRIMITIVE,
    "System.SByte": TypeCategory.PRIMITIVE,
    "System.Int16": TypeCategory.PRIMITIVE,
    "System.UInt16": TypeCategory.PRIMITIVE,
    "System.Int32": TypeCategory.PRIMITIVE,
    "System.UInt32": TypeCategory.PRIMITIVE,
    "System.Int64": TypeCategory.PRIMITIVE,
    "System.UInt64": TypeCategory.PRIMITIVE,
    "System.Single": TypeCategory.PRIMITIVE,
    "System.Double": TypeCategory.PRIMITIVE,
    "System.Decimal": TypeCategory.VALUE_TYPE,
    "System.DateTime": TypeCategory.VALUE_TYPE,
    "System.DateTimeOffset": TypeCategory.VALUE_TYPE,
    "System.TimeSpan": TypeCategory.VALUE_TYPE,
    "System.Guid": TypeCategory.VALUE_TYPE,
}

_ACCESSOR_PREFIXES: Tuple[Tuple[str, AccessorRole], ...] = (
    ("get_", AccessorRole.GET),
    ("set_", AccessorRole.SET),
    ("add_", AccessorRole.ADD),
    ("remove_", AccessorRole.REMOVE),
)

_DIRECTIONS = {
    "in": ParameterDirection.IN,
    "out": ParameterDirection.OUT,
    "inout": ParameterDirection.INOUT,
    "ref": ParameterDirection.INOUT,
}

_SCALAR_TYPES = (
    (bool, "System.Boolean"),
    (int, "System.Int32"),
    (float, "System.Double"),
    (str, "System.String"),
)


class MetadataResolutionError(RuntimeError):
    """Raised when the primary or a referenced metadata document cannot be found."""


class MetadataFormatError(ValueError):
    """Raised when a metadata document does not have the expected shape."""


@dataclass(frozen=True)
class LoadedLibrary:
    """A library snapshot plus the types of the libraries it references."""

    library: LibraryMetadata
    external_types: Tuple[TypeDescriptor, ...] = ()

    def graph(self, types: Optional[Iterable[TypeDescriptor]] = None) -> TypeGraph:
        emitted = self.library.types if types is None else types
        # filtered-out library types still answer subtype and enum lookups
        return TypeGraph(emitted, self.external_types + self.library.types)


class MetadataProvider:
    """Loads metadata documents and resolves their reference closure."""

    def __init__(self, search_paths: Sequence[Path] = ()) -> None:
        self.search_paths = tuple(Path(path) for path in search_paths)
        self.logger = get_logger("provider")

    def load(self, path: Path) -> LoadedLibrary:
        primary_path = Path(path).expanduser()
        if not primary_path.is_file():
            raise MetadataResolutionError(f"Library metadata not found: {primary_path}")
        self.logger.info("Reading library metadata from %s", primary_path)

        primary = _read_document(primary_path)
        secondary = self._load_references(primary_path, primary)

        kinds: Dict[str, TypeKind] = {}
        for document in [primary, *secondary]:
            for entry in _as_list(document.get("types"), "types"):
                type_id, kind = _identify(entry)
                kinds[type_id] = kind

        parser = _DocumentParser(kinds)
        library = parser.library(primary, fallback_name=primary_path.stem)
        external: List[TypeDescriptor] = []
        for document in secondary:
            external.extend(parser.types(document))

        self.logger.info(
            "Loaded %d types from %s (%d referenced types)",
            len(library.types),
            library.name,
            len(external),
        )
        return LoadedLibrary(library=library, external_types=tuple(external))

    def _load_references(self, primary_path: Path, primary: Mapping[str, Any]) -> List[Mapping[str, Any]]:
        loaded: List[Mapping[str, Any]] = []
        seen: Set[Path] = {primary_path.resolve()}
        pending: List[Tuple[Path, str]] = [
            (primary_path.parent, name) for name in _as_str_list(primary.get("references"), "references")
        ]
        while pending:
            base_dir, name = pending.pop(0)
            resolved = self.resolve_reference(name, base_dir)
            if resolved.resolve() in seen:
                continue
            seen.add(resolved.resolve())
            self.logger.debug("Binding referenced library %s -> %s", name, resolved)
            document = _read_document(resolved)
            loaded.append(document)
            pending.extend(
                (resolved.parent, child) for child in _as_str_list(document.get("references"), "references")
            )
        return loaded

    def resolve_reference(self, name: str, base_dir: Path) -> Path:
        """Locate a referenced document next to its referrer or on the search paths."""
        candidates: List[Path] = []
        for directory in (base_dir, *self.search_paths):
            candidates.append(directory / name)
            if Path(name).suffix not in DOCUMENT_SUFFIXES:
                candidates.extend(directory / f"{name}{suffix}" for suffix in DOCUMENT_SUFFIXES)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise MetadataResolutionError(
            f"Cannot resolve referenced library '{name}' (searched {len(candidates)} locations)"
        )


def load_library(path: Path, search_paths: Sequence[Path] = ()) -> LoadedLibrary:
    return MetadataProvider(search_paths).load(path)


class _DocumentParser:
    def __init__(self, kinds: Mapping[str, TypeKind]) -> None:
        self.kinds = kinds

    def library(self, document: Mapping[str, Any], *, fallback_name: str) -> LibraryMetadata:
        types = self.types(document)
        known = {descriptor.id for descriptor in types}
        for descriptor in types:
            if descriptor.enclosing_id is not None and descriptor.enclosing_id not in known:
                raise MetadataFormatError(
                    f"Nested type {descriptor.id} refers to unknown enclosing type {descriptor.enclosing_id}"
                )
        return LibraryMetadata(
            name=str(document.get("name") or fallback_name),
            version=str(document.get("version") or "0.0.0.0"),
            types=types,
            attributes=tuple(
                self.attribute(entry) for entry in _as_list(document.get("attributes"), "attributes")
            ),
            references=tuple(_as_str_list(document.get("references"), "references")),
        )

    def types(self, document: Mapping[str, Any]) -> Tuple[TypeDescriptor, ...]:
        descriptors: List[TypeDescriptor] = []
        seen: Set[str] = set()
        for entry in _as_list(document.get("types"), "types"):
            descriptor = self.type(entry)
            if descriptor.id in seen:
                raise MetadataFormatError(f"Duplicate type id {descriptor.id}")
            seen.add(descriptor.id)
            descriptors.append(descriptor)
        return tuple(descriptors)

    def type(self, entry: Mapping[str, Any]) -> TypeDescriptor:
        type_id, kind = _identify(entry)
        generic_names = tuple(_as_str_list(entry.get("generic_parameters"), "generic_parameters"))
        scope = frozenset(generic_names)
        private_fields = set(_as_str_list(entry.get("private_fields"), "private_fields"))

        properties = tuple(self.property(raw, scope) for raw in _as_list(entry.get("properties"), "properties"))
        events = tuple(
            self.event(raw, scope, private_fields) for raw in _as_list(entry.get("events"), "events")
        )
        property_names = {prop.name for prop in properties}
        event_names = {event.name for event in events}
        methods = tuple(
            self.method(raw, scope, property_names, event_names)
            for raw in _as_list(entry.get("methods"), "methods")
        )

        base = entry.get("base")
        return TypeDescriptor(
            id=type_id,
            name=str(entry["name"]),
            kind=kind,
            namespace=_optional_str(entry.get("namespace")),
            base_type=self.ref(base, scope) if base is not None else None,
            interfaces=tuple(self.ref(raw, scope) for raw in _as_list(entry.get("interfaces"), "interfaces")),
            enclosing_id=_optional_str(entry.get("nested_in")),
            generic_parameters=tuple(
                TypeReference(name=name, category=TypeCategory.GENERIC_PARAMETER) for name in generic_names
            ),
            members=Members(
                constructors=tuple(
                    Constructor(parameters=self.parameters(raw.get("parameters"), scope))
                    for raw in _as_mappings(entry.get("constructors"), "constructors")
                ),
                fields=tuple(self.field(raw, scope) for raw in _as_mappings(entry.get("fields"), "fields")),
                properties=properties,
                events=events,
                methods=methods,
            ),
            is_public=_flag(entry, "public", True),
            is_abstract=_flag(entry, "abstract", False),
            is_sealed=_flag(entry, "sealed", False),
        )

    def field(self, raw: Mapping[str, Any], scope: FrozenSet[str]) -> Field:
        return Field(
            name=_required_str(raw, "name"),
            type=self.ref(raw.get("type"), scope),
            is_const=_flag(raw, "const", False),
            is_static=_flag(raw, "static", False),
            is_readonly=_flag(raw, "readonly", False),
            constant_value=raw.get("value"),
        )

    def property(self, raw: Any, scope: FrozenSet[str]) -> Property:
        raw = _as_mapping(raw, "property")
        return Property(
            name=_required_str(raw, "name"),
            type=self.ref(raw.get("type"), scope),
            can_read=_flag(raw, "read", True),
            can_write=_flag(raw, "write", False),
            index_parameters=self.parameters(raw.get("index_parameters"), scope),
            is_static=_flag(raw, "static", False),
        )

    def event(self, raw: Any, scope: FrozenSet[str], private_fields: Set[str]) -> Event:
        raw = _as_mapping(raw, "event")
        name = _required_str(raw, "name")
        explicit = raw.get("explicit_accessors")
        return Event(
            name=name,
            handler_type=self.ref(raw.get("type"), scope),
            has_explicit_accessors=bool(explicit) if explicit is not None else name in private_fields,
            is_static=_flag(raw, "static", False),
        )

    def method(
        self,
        raw: Any,
        scope: FrozenSet[str],
        property_names: Set[str],
        event_names: Set[str],
    ) -> Method:
        raw = _as_mapping(raw, "method")
        name = _required_str(raw, "name")
        method_generics = tuple(_as_str_list(raw.get("generic_parameters"), "generic_parameters"))
        method_scope = scope | frozenset(method_generics)
        base = raw.get("base_definition")

        if "accessor" in raw:
            accessor = _accessor_role(raw.get("accessor"))
        else:
            accessor = accessor_role_for(name, property_names, event_names)

        return Method(
            name=name,
            return_type=self.ref(raw.get("returns"), method_scope),
            parameters=self.parameters(raw.get("parameters"), method_scope),
            is_static=_flag(raw, "static", False),
            is_virtual=_flag(raw, "virtual", False),
            base_definition_type=self.ref(base, scope) if base is not None else None,
            accessor=accessor,
            generic_parameters=method_generics,
        )

    def parameters(self, raw: Any, scope: FrozenSet[str]) -> Tuple[Parameter, ...]:
        parameters: List[Parameter] = []
        for entry in _as_mappings(raw, "parameters"):
            direction_name = str(entry.get("direction") or "in").lower()
            direction = _DIRECTIONS.get(direction_name)
            if direction is None:
                raise MetadataFormatError(f"Unknown parameter direction '{direction_name}'")
            parameters.append(
                Parameter(
                    name=_required_str(entry, "name"),
                    type=self.ref(entry.get("type"), scope),
                    direction=direction,
                )
            )
        return tuple(parameters)

    def attribute(self, raw: Any) -> AttributeDescriptor:
        raw = _as_mapping(raw, "attribute")
        named = _as_dict(raw.get("named_arguments"), "named_arguments")
        return AttributeDescriptor(
            type_name=_required_str(raw, "type"),
            arguments=tuple(self.argument(entry) for entry in _as_list(raw.get("arguments"), "arguments")),
            named_arguments=tuple((str(key), self.argument(value)) for key, value in named.items()),
        )

    def argument(self, raw: Any) -> AttributeArgument:
        if isinstance(raw, Mapping):
            value = raw.get("value")
            type_raw = raw.get("type")
            if type_raw is None:
                type_raw = _scalar_type_name(value)
            return AttributeArgument(value=value, type=self.ref(type_raw, frozenset()))
        return AttributeArgument(value=raw, type=self.ref(_scalar_type_name(raw), frozenset()))

    def ref(self, raw: Any, scope: FrozenSet[str] = frozenset()) -> TypeReference:
        """Parse a type reference given as a name string or a mapping."""
        if raw is None:
            return TypeReference.void()
        if isinstance(raw, str):
            name, by_ref = _split_by_ref(raw)
            return TypeReference(name=name, category=self._category(name, False, scope), is_by_ref=by_ref)
        if not isinstance(raw, Mapping):
            raise MetadataFormatError(f"Unsupported type reference: {raw!r}")

        name, by_ref = _split_by_ref(_required_str(raw, "name"))
        arguments = tuple(self.ref(argument, scope) for argument in _as_list(raw.get("arguments"), "arguments"))
        nullable = bool(raw.get("nullable")) or (name == NULLABLE_TYPE_NAME and len(arguments) == 1)
        category_name = raw.get("category")
        if category_name is not None:
            try:
                category = TypeCategory(str(category_name))
            except ValueError as exc:
                raise MetadataFormatError(f"Unknown type category '{category_name}'") from exc
        else:
            category = self._category(name, nullable, scope)
        return TypeReference(
            name=name,
            generic_arguments=arguments,
            is_nullable=nullable,
            category=category,
            is_by_ref=by_ref or bool(raw.get("by_ref")),
        )

    def _category(self, name: str, nullable: bool, scope: FrozenSet[str]) -> TypeCategory:
        if nullable:
            return TypeCategory.VALUE_TYPE
        if name in scope:
            return TypeCategory.GENERIC_PARAMETER
        known = WELL_KNOWN_CATEGORIES.get(name)
        if known is not None:
            return known
        kind = self.kinds.get(name)
        if kind is TypeKind.ENUM:
            return TypeCategory.ENUM
        if kind is TypeKind.STRUCT:
            return TypeCategory.VALUE_TYPE
        return TypeCategory.REFERENCE


def accessor_role_for(
    method_name: str, property_names: Set[str], event_names: Set[str]
) -> Optional[AccessorRole]:
    """Match ``get_X``/``set_X``/``add_X``/``remove_X`` against declared members."""
    for prefix, role in _ACCESSOR_PREFIXES:
        if not method_name.startswith(prefix):
            continue
        member = method_name[len(prefix):]
        owners = property_names if role in (AccessorRole.GET, AccessorRole.SET) else event_names
        if member in owners:
            return role
    return None


def _identify(entry: Any) -> Tuple[str, TypeKind]:
    entry = _as_mapping(entry, "type")
    name = _required_str(entry, "name")
    kind_name = str(entry.get("kind") or "class").lower()
    try:
        kind = TypeKind(kind_name)
    except ValueError as exc:
        raise MetadataFormatError(f"Unknown type kind '{kind_name}' for {name}") from exc

    explicit_id = _optional_str(entry.get("id"))
    if explicit_id:
        return explicit_id, kind
    enclosing = _optional_str(entry.get("nested_in"))
    if enclosing:
        return f"{enclosing}+{name}", kind
    namespace = _optional_str(entry.get("namespace"))
    return (f"{namespace}.{name}" if namespace else name), kind


def _read_document(path: Path) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataResolutionError(f"Cannot read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise MetadataFormatError(f"{path.name} is not valid UTF-8: {exc}") from exc
    try:
        if path.suffix == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            data = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MetadataFormatError(f"Failed to parse {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise MetadataFormatError(f"{path.name} must contain a mapping at the root")
    return data


def _split_by_ref(name: str) -> Tuple[str, bool]:
    if name.endswith("&"):
        return name.rstrip("&"), True
    return name, False


def _scalar_type_name(value: Any) -> str:
    for python_type, type_name in _SCALAR_TYPES:
        if isinstance(value, python_type):
            return type_name
    return "System.Object"


def _accessor_role(value: Any) -> Optional[AccessorRole]:
    if value is None or value is False:
        return None
    try:
        return AccessorRole(str(value).lower())
    except ValueError as exc:
        raise MetadataFormatError(f"Unknown accessor role '{value}'") from exc


def _as_list(value: Any, label: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise MetadataFormatError(f"'{label}' must be a list")


def _as_mappings(value: Any, label: str) -> List[Mapping[str, Any]]:
    return [_as_mapping(entry, label) for entry in _as_list(value, label)]


def _as_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    raise MetadataFormatError(f"Each {label} entry must be a mapping")


def _as_dict(value: Any, label: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _as_mapping(value, label)


def _as_str_list(value: Any, label: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise MetadataFormatError(f"'{label}' must be a string or a list")


def _required_str(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise MetadataFormatError(f"Missing '{key}' in {dict(raw)!r}")
    return value


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def _flag(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    return bool(value)


__all__ = [
    "LoadedLibrary",
    "MetadataFormatError",
    "MetadataProvider",
    "MetadataResolutionError",
    "WELL_KNOWN_CATEGORIES",
    "accessor_role_for",
    "load_library",
]
