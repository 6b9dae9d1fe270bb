"""Core data models shared across declshell components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


class TypeKind(str, Enum):
    """Closed set of declaration kinds a type descriptor can carry."""

    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    DELEGATE = "delegate"

    @property
    def is_value_kind(self) -> bool:
        return self in (TypeKind.STRUCT, TypeKind.ENUM)


class TypeCategory(str, Enum):
    """Category of a referenced type, used to pick its default value."""

    VOID = "void"
    BOOLEAN = "boolean"
    CHAR = "char"
    NATIVE_INT = "native_int"
    PRIMITIVE = "primitive"
    ENUM = "enum"
    VALUE_TYPE = "value_type"
    GENERIC_PARAMETER = "generic_parameter"
    REFERENCE = "reference"


class ParameterDirection(str, Enum):
    IN = "in"
    OUT = "out"
    INOUT = "inout"


class AccessorRole(str, Enum):
    """Marks a method as the implicit accessor of a property or event."""

    GET = "get"
    SET = "set"
    ADD = "add"
    REMOVE = "remove"


VOID_TYPE_NAME = "System.Void"


@dataclass(frozen=True)
class TypeReference:
    """A reference to a type as it appears in a signature."""

    name: str
    generic_arguments: Tuple["TypeReference", ...] = ()
    is_nullable: bool = False
    category: TypeCategory = TypeCategory.REFERENCE
    is_by_ref: bool = False

    @classmethod
    def void(cls) -> "TypeReference":
        return cls(name=VOID_TYPE_NAME, category=TypeCategory.VOID)

    @property
    def is_void(self) -> bool:
        return self.category is TypeCategory.VOID or self.name == VOID_TYPE_NAME

    def element_type(self) -> "TypeReference":
        """Return the referenced type with any by-ref marker removed."""
        if not self.is_by_ref and not self.name.endswith("&"):
            return self
        return TypeReference(
            name=self.name.rstrip("&"),
            generic_arguments=self.generic_arguments,
            is_nullable=self.is_nullable,
            category=self.category,
        )


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeReference
    direction: ParameterDirection = ParameterDirection.IN


@dataclass(frozen=True)
class Constructor:
    parameters: Tuple[Parameter, ...] = ()


@dataclass(frozen=True)
class Field:
    name: str
    type: TypeReference
    is_const: bool = False
    is_static: bool = False
    is_readonly: bool = False
    constant_value: Any = None


@dataclass(frozen=True)
class Property:
    name: str
    type: TypeReference
    can_read: bool = True
    can_write: bool = False
    index_parameters: Tuple[Parameter, ...] = ()
    is_static: bool = False


@dataclass(frozen=True)
class Event:
    name: str
    handler_type: TypeReference
    has_explicit_accessors: bool = False
    is_static: bool = False


@dataclass(frozen=True)
class Method:
    name: str
    return_type: TypeReference = field(default_factory=TypeReference.void)
    parameters: Tuple[Parameter, ...] = ()
    is_static: bool = False
    is_virtual: bool = False
    base_definition_type: Optional[TypeReference] = None
    accessor: Optional[AccessorRole] = None
    generic_parameters: Tuple[str, ...] = ()

    @property
    def is_accessor(self) -> bool:
        return self.accessor is not None


@dataclass(frozen=True)
class Members:
    """Declared public members of a type, in provider order."""

    constructors: Tuple[Constructor, ...] = ()
    fields: Tuple[Field, ...] = ()
    properties: Tuple[Property, ...] = ()
    events: Tuple[Event, ...] = ()
    methods: Tuple[Method, ...] = ()


@dataclass(frozen=True)
class TypeDescriptor:
    """Metadata record describing one declared type.

    ``id`` is the stable arena key (the metadata full name, e.g.
    ``Acme.Outer+Inner``). ``enclosing_id`` points at the enclosing type's id
    for nested types; it is a lookup key, never an owning reference.
    """

    id: str
    name: str
    kind: TypeKind
    namespace: Optional[str] = None
    base_type: Optional[TypeReference] = None
    interfaces: Tuple[TypeReference, ...] = ()
    enclosing_id: Optional[str] = None
    generic_parameters: Tuple[TypeReference, ...] = ()
    members: Members = field(default_factory=Members)
    is_public: bool = True
    is_abstract: bool = False
    is_sealed: bool = False

    @property
    def is_nested(self) -> bool:
        return self.enclosing_id is not None

    @property
    def full_name(self) -> str:
        return self.id

    @property
    def is_static(self) -> bool:
        """Static classes surface in metadata as abstract and sealed."""
        return self.kind is TypeKind.CLASS and self.is_abstract and self.is_sealed

    def reference(self) -> TypeReference:
        """Return a reference to this type, open over its generic parameters."""
        if self.kind is TypeKind.ENUM:
            category = TypeCategory.ENUM
        elif self.kind is TypeKind.STRUCT:
            category = TypeCategory.VALUE_TYPE
        else:
            category = TypeCategory.REFERENCE
        return TypeReference(
            name=self.id,
            generic_arguments=self.generic_parameters,
            category=category,
        )


@dataclass(frozen=True)
class AttributeArgument:
    value: Any
    type: TypeReference


@dataclass(frozen=True)
class AttributeDescriptor:
    """An assembly-level custom attribute and its constructor arguments."""

    type_name: str
    arguments: Tuple[AttributeArgument, ...] = ()
    named_arguments: Tuple[Tuple[str, AttributeArgument], ...] = ()


@dataclass(frozen=True)
class LibraryMetadata:
    """Snapshot of a library's exported surface."""

    name: str
    version: str = "0.0.0.0"
    types: Tuple[TypeDescriptor, ...] = ()
    attributes: Tuple[AttributeDescriptor, ...] = ()
    references: Tuple[str, ...] = ()


__all__ = [
    "AccessorRole",
    "AttributeArgument",
    "AttributeDescriptor",
    "Constructor",
    "Event",
    "Field",
    "LibraryMetadata",
    "Members",
    "Method",
    "Parameter",
    "ParameterDirection",
    "Property",
    "TypeCategory",
    "TypeDescriptor",
    "TypeKind",
    "TypeReference",
    "VOID_TYPE_NAME",
]
