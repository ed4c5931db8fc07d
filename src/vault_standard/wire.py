"""
Externally tagged JSON codec shared by every message family.

A variant is encoded as a single-key object whose key is the snake_case
variant name: ``{"deposit": {"amount": "10", "recipient": null}}``. Newtype
variants carry their value directly: ``{"native": "uosmo"}``.
"""
from __future__ import annotations

import json
from typing import Annotated, Any, Callable, Dict, Iterable, Mapping, Optional, Protocol, Tuple, Type, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    PlainSerializer,
    Strict,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_snake

from vault_standard.errors import MalformedMessage

UINT128_MAX: int = 2**128 - 1


def _bounded(bits: int) -> AfterValidator:
    upper = 2**bits - 1

    def check(value: int) -> int:
        if not 0 <= value <= upper:
            raise ValueError(f"{value} is out of range for an unsigned {bits}-bit integer")
        return value

    return AfterValidator(check)


def _decimal(value: Any) -> Any:
    """Accept a string of ASCII digits or a JSON integer, nothing looser."""
    if isinstance(value, bool):
        raise ValueError("expected a decimal string, got a boolean")
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            raise ValueError(f"expected a decimal string, got {value!r}")
        return int(value)
    return value


# Wide integers travel as decimal strings so JSON consumers never lose precision.
Uint128 = Annotated[
    int, Strict(), BeforeValidator(_decimal), _bounded(128), PlainSerializer(str, return_type=str, when_used="json")
]
Uint64 = Annotated[
    int, Strict(), BeforeValidator(_decimal), _bounded(64), PlainSerializer(str, return_type=str, when_used="json")
]
U64 = Annotated[int, Strict(), _bounded(64)]
U32 = Annotated[int, Strict(), _bounded(32)]
Uint16 = Annotated[int, Strict(), _bounded(16)]

Decoder = Callable[[Any], Any]


class WireEncodable(Protocol):
    """Anything that knows its own wire representation."""

    def to_wire(self) -> Any:
        ...


class ExtensionCodec(Protocol):
    """Decoder for the payload carried by a ``VaultExtension`` variant."""

    def decode(self, data: Any) -> WireEncodable:
        ...


class WireModel(BaseModel):
    """Immutable model that rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Variant(WireModel):
    """A struct member of an externally tagged union."""

    @classmethod
    def tag(cls) -> str:
        return to_snake(cls.__name__)

    @classmethod
    def from_payload(cls, payload: Any) -> "Variant":
        if not isinstance(payload, Mapping):
            raise MalformedMessage(f"Variant {cls.tag()!r} expects an object, got {type(payload).__name__}")
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise MalformedMessage(f"Invalid {cls.tag()!r} payload: {exc}") from exc

    def wire_payload(self) -> Any:
        return self.model_dump(mode="json")

    def to_wire(self) -> Dict[str, Any]:
        return {self.tag(): self.wire_payload()}


class NewtypeVariant(Variant):
    """A member wrapping exactly one unnamed value."""

    @classmethod
    def value_field(cls) -> str:
        return next(iter(cls.model_fields))

    @classmethod
    def from_payload(cls, payload: Any) -> "NewtypeVariant":
        try:
            return cls.model_validate({cls.value_field(): payload})
        except ValidationError as exc:
            raise MalformedMessage(f"Invalid {cls.tag()!r} payload: {exc}") from exc

    def wire_payload(self) -> Any:
        return self.model_dump(mode="json")[self.value_field()]


def split_tag(data: Any, union_name: str) -> Tuple[str, Any]:
    """Return ``(tag, payload)`` of a single-key wire object."""
    if not isinstance(data, Mapping) or len(data) != 1:
        raise MalformedMessage(f"{union_name} must be an object with exactly one key, got {data!r}")
    ((tag, payload),) = data.items()
    return tag, payload


class TaggedUnion:
    """
    Codec for a closed set of variants.

    ``base`` is the common Python type of decoded values; it lets a union be
    used as a pydantic field type through ``field_type``.
    """

    def __init__(
        self,
        name: str,
        members: Iterable[Type[Variant]] = (),
        aliases: Optional[Mapping[str, str]] = None,
        base: Type[Any] = object,
    ) -> None:
        self.name = name
        self.base = base
        self._decoders: Dict[str, Decoder] = {}
        self._aliases: Dict[str, str] = {}
        for member in members:
            self.add(member.tag(), member.from_payload)
        for alias, target in (aliases or {}).items():
            self.add(alias, self._decoders[target])
            self._aliases[alias] = target

    def add(self, tag: str, decoder: Decoder) -> None:
        if tag in self._decoders:
            raise ValueError(f"{self.name} already has a variant tagged {tag!r}")
        self._decoders[tag] = decoder

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(tag for tag in self._decoders if tag not in self._aliases)

    def __contains__(self, tag: object) -> bool:
        return tag in self._decoders

    def unknown_tag(self, tag: str) -> Exception:
        return MalformedMessage(f"Unknown {self.name} variant {tag!r}")

    def decode(self, data: Any) -> Any:
        tag, payload = split_tag(data, self.name)
        decoder = self._decoders.get(tag)
        if decoder is None:
            raise self.unknown_tag(tag)
        return decoder(payload)

    def decode_json(self, raw: Union[bytes, str]) -> Any:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedMessage(f"{self.name} is not valid JSON: {exc}") from exc
        return self.decode(data)

    def coerce(self, value: Any) -> Any:
        """Pass decoded values through, decode anything else."""
        if isinstance(value, self.base):
            return value
        return self.decode(value)

    def field_type(self) -> Any:
        return Annotated[
            self.base,
            BeforeValidator(self.coerce),
            PlainSerializer(lambda value: value.to_wire()),
        ]


def to_json(msg: WireEncodable) -> bytes:
    """Compact JSON bytes of a message, as sent to a contract."""
    return json.dumps(msg.to_wire(), separators=(",", ":")).encode()


def dump_value(type_: Any, value: Any) -> bytes:
    return TypeAdapter(type_).dump_json(value)


def load_value(type_: Any, data: Any) -> Any:
    return TypeAdapter(type_).validate_python(data)
