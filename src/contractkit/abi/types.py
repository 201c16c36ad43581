"""
ABI data model.

An ABI is loaded once into immutable AbiEntry objects held by an
AbiDescriptor, preserving declaration order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from contractkit.errors import ValidationError

__all__ = ["AbiKind", "AbiParam", "AbiEntry", "AbiDescriptor"]


class AbiKind(str, Enum):
    CONSTRUCTOR = "constructor"
    FUNCTION = "function"
    EVENT = "event"
    FALLBACK = "fallback"
    RECEIVE = "receive"
    ERROR = "error"


@dataclass(frozen=True)
class AbiParam:
    name: str
    type: str
    indexed: bool = False

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> AbiParam:
        if "type" not in raw:
            raise ValidationError("ABI parameter is missing 'type'", field="inputs")
        return cls(
            name=raw.get("name", ""),
            type=_canonical_type(raw),
            indexed=bool(raw.get("indexed", False)),
        )


def _canonical_type(raw: Mapping[str, Any]) -> str:
    """Expand ``tuple`` parameters into ``(t1,t2,...)`` signature form."""
    abi_type = raw["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in raw.get("components", []))
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


@dataclass(frozen=True)
class AbiEntry:
    """
    One constructor, function, event (or other) declaration.

    Attributes:
        kind: Entry kind
        name: Entry name ("" for constructors)
        inputs: Ordered input parameters
        outputs: Ordered output parameters (functions only)
        payable: Whether the entry accepts value
        state_mutability: Raw ``stateMutability`` value when present
        anonymous: Anonymous flag (events only)
    """

    kind: AbiKind
    name: str = ""
    inputs: Tuple[AbiParam, ...] = ()
    outputs: Tuple[AbiParam, ...] = ()
    payable: bool = False
    state_mutability: Optional[str] = None
    anonymous: bool = False

    @property
    def input_types(self) -> Tuple[str, ...]:
        return tuple(p.type for p in self.inputs)

    @property
    def output_types(self) -> Tuple[str, ...]:
        return tuple(p.type for p in self.outputs)

    @property
    def arity(self) -> int:
        return len(self.inputs)

    @property
    def signature(self) -> str:
        """Canonical signature, e.g. ``transfer(address,uint256)``."""
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def is_constant(self) -> bool:
        return self.state_mutability in ("view", "pure")

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> AbiEntry:
        """
        Parse one ABI JSON object.

        Entries without ``type`` are functions, as in the Solidity ABI format.
        """
        if not isinstance(raw, Mapping):
            raise ValidationError("ABI entries must be objects", field="abi")
        try:
            kind = AbiKind(raw.get("type", "function"))
        except ValueError:
            raise ValidationError(f"Unknown ABI entry type: {raw.get('type')!r}", field="abi")

        mutability = raw.get("stateMutability")
        return cls(
            kind=kind,
            name=raw.get("name", ""),
            inputs=tuple(AbiParam.from_json(p) for p in raw.get("inputs", [])),
            outputs=tuple(AbiParam.from_json(p) for p in raw.get("outputs", []) or []),
            payable=bool(raw.get("payable", False)) or mutability == "payable",
            state_mutability=mutability,
            anonymous=bool(raw.get("anonymous", False)),
        )


class AbiDescriptor(Sequence[AbiEntry]):
    """
    Ordered, immutable collection of ABI entries.

    Example:
        >>> abi = AbiDescriptor.from_json('[{"type": "constructor", "inputs": []}]')
        >>> [e.kind for e in abi.constructors]
        [<AbiKind.CONSTRUCTOR: 'constructor'>]
    """

    def __init__(self, entries: Sequence[AbiEntry] = ()) -> None:
        self._entries: Tuple[AbiEntry, ...] = tuple(entries)

    @classmethod
    def from_json(cls, raw: Union[str, bytes, Sequence[Mapping[str, Any]]]) -> AbiDescriptor:
        """
        Build a descriptor from ABI JSON text or an already-parsed list.

        Raises:
            ValidationError: If the input is not a list of ABI objects
        """
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ValidationError(f"ABI is not valid JSON: {e}", field="abi") from e
        if not isinstance(raw, (list, tuple)):
            raise ValidationError("ABI must be a list of entries", field="abi")
        return cls([AbiEntry.from_json(item) for item in raw])

    @classmethod
    def coerce(cls, abi: Union[AbiDescriptor, str, bytes, Sequence[Any]]) -> AbiDescriptor:
        if isinstance(abi, AbiDescriptor):
            return abi
        return cls.from_json(abi)

    def __getitem__(self, index):  # type: ignore[override]
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AbiEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"AbiDescriptor({len(self._entries)} entries)"

    def of_kind(self, kind: AbiKind) -> List[AbiEntry]:
        return [e for e in self._entries if e.kind == kind]

    @property
    def constructors(self) -> List[AbiEntry]:
        return self.of_kind(AbiKind.CONSTRUCTOR)

    @property
    def functions(self) -> List[AbiEntry]:
        return self.of_kind(AbiKind.FUNCTION)

    @property
    def events(self) -> List[AbiEntry]:
        return self.of_kind(AbiKind.EVENT)

