"""Wire-format encoding for Tron `Transaction.raw` (minimal protobuf subset).

Covers the three contract kinds the wallet builds itself: TransferContract,
TransferAssetContract and TriggerSmartContract. Field numbers follow
`protocol/core/Tron.proto` and `protocol/core/contract/*.proto`.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Optional

import base58

from .config import BASE58_ADDRESS_LENGTH, HEX_ADDRESS_LENGTH, HEX_ADDRESS_PREFIX
from .errors import ErrorCode, FeeError
from .types import CONTRACT_TYPE_IDS, ContractInvocation, ContractType

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LEN = 2
WIRE_FIXED32 = 5

TYPE_URL_PREFIX = "type.googleapis.com/protocol."

_CONTRACT_TYPES_BY_ID = {v: k for k, v in CONTRACT_TYPE_IDS.items()}

# contract kind -> [(field number, parameter key, kind)]
_CONTRACT_FIELDS: dict[ContractType, list[tuple[int, str, str]]] = {
    ContractType.TRANSFER: [
        (1, "owner_address", "address"),
        (2, "to_address", "address"),
        (3, "amount", "int"),
    ],
    ContractType.TRANSFER_ASSET: [
        (1, "asset_name", "text"),
        (2, "owner_address", "address"),
        (3, "to_address", "address"),
        (4, "amount", "int"),
    ],
    ContractType.TRIGGER_SMART_CONTRACT: [
        (1, "owner_address", "address"),
        (2, "contract_address", "address"),
        (3, "call_value", "int"),
        (4, "data", "hex"),
        (5, "call_token_value", "int"),
        (6, "token_id", "int"),
    ],
}


# --- addresses ---


def is_hex_address(address: str) -> bool:
    if not isinstance(address, str) or len(address) != HEX_ADDRESS_LENGTH:
        return False
    if not address.startswith(HEX_ADDRESS_PREFIX):
        return False
    try:
        bytes.fromhex(address)
    except ValueError:
        return False
    return True


def is_base58_address(address: str) -> bool:
    if not isinstance(address, str) or len(address) != BASE58_ADDRESS_LENGTH:
        return False
    if not address.startswith("T"):
        return False
    try:
        raw = base58.b58decode_check(address)
    except ValueError:
        return False
    return len(raw) == 21 and raw[0] == 0x41


def to_hex_address(address: str) -> str:
    """Normalize a base58check (`T...`) or hex (`41...`) address to hex."""
    if is_hex_address(address):
        return address.lower()
    if is_base58_address(address):
        return base58.b58decode_check(address).hex()
    raise FeeError(ErrorCode.INVALID_ADDRESS, f"not a tron address: {address!r}")


def to_base58_address(address: str) -> str:
    if is_base58_address(address):
        return address
    if is_hex_address(address):
        return base58.b58encode_check(bytes.fromhex(address)).decode("ascii")
    raise FeeError(ErrorCode.INVALID_ADDRESS, f"not a tron address: {address!r}")


def address_bytes(address: str) -> bytes:
    return bytes.fromhex(to_hex_address(address))


# --- writer ---


@dataclass
class Writer:
    buf: bytearray

    def write_varint(self, v: int) -> None:
        if v < 0:
            # int64 negatives are sign-extended to ten bytes
            v += 1 << 64
        while True:
            byte = v & 0x7F
            v >>= 7
            if v:
                self.buf.append(byte | 0x80)
            else:
                self.buf.append(byte)
                return

    def write_tag(self, field_number: int, wire_type: int) -> None:
        self.write_varint((field_number << 3) | wire_type)

    def write_int_field(self, field_number: int, v: int) -> None:
        # proto3 scalar defaults are not serialized
        if v == 0:
            return
        self.write_tag(field_number, WIRE_VARINT)
        self.write_varint(v)

    def write_bytes_field(self, field_number: int, b: bytes) -> None:
        if not b:
            return
        self.write_tag(field_number, WIRE_LEN)
        self.write_varint(len(b))
        self.buf.extend(b)

    def write_message_field(self, field_number: int, message: bytes) -> None:
        self.write_tag(field_number, WIRE_LEN)
        self.write_varint(len(message))
        self.buf.extend(message)


def _encode_contract_value(contract_type: ContractType, parameter: dict[str, Any]) -> bytes:
    w = Writer(bytearray())
    for field_number, key, kind in _CONTRACT_FIELDS[contract_type]:
        value = parameter.get(key)
        if value is None:
            continue
        if kind == "address":
            w.write_bytes_field(field_number, address_bytes(value))
        elif kind == "int":
            w.write_int_field(field_number, int(value))
        elif kind == "hex":
            try:
                w.write_bytes_field(field_number, bytes.fromhex(_strip_0x(value)))
            except ValueError:
                raise FeeError(ErrorCode.INVALID_PAYLOAD, f"{key} is not hex") from None
        else:
            w.write_bytes_field(field_number, str(value).encode())
    return bytes(w.buf)


def encode_contract(invocation: ContractInvocation) -> bytes:
    contract_type = invocation.contract_type
    if contract_type is None:
        raise FeeError(ErrorCode.INVALID_PAYLOAD, f"cannot encode contract type {invocation.type}")

    any_msg = Writer(bytearray())
    any_msg.write_bytes_field(1, (TYPE_URL_PREFIX + contract_type.value).encode())
    any_msg.write_bytes_field(2, _encode_contract_value(contract_type, invocation.parameter))

    w = Writer(bytearray())
    w.write_int_field(1, CONTRACT_TYPE_IDS[contract_type])
    w.write_message_field(2, bytes(any_msg.buf))
    return bytes(w.buf)


def encode_raw_data(
    contracts: list[ContractInvocation],
    ref_block_bytes: bytes,
    ref_block_hash: bytes,
    expiration: int,
    timestamp: int,
    fee_limit: Optional[int] = None,
) -> bytes:
    """Encode `Transaction.raw` in field-number order."""
    if len(ref_block_bytes) != 2:
        raise FeeError(ErrorCode.INVALID_FORMAT, "ref_block_bytes must be 2 bytes")
    if len(ref_block_hash) != 8:
        raise FeeError(ErrorCode.INVALID_FORMAT, "ref_block_hash must be 8 bytes")
    if not contracts:
        raise FeeError(ErrorCode.INVALID_PAYLOAD, "transaction has no contracts")

    w = Writer(bytearray())
    w.write_bytes_field(1, ref_block_bytes)
    w.write_bytes_field(4, ref_block_hash)
    w.write_int_field(8, expiration)
    for contract in contracts:
        w.write_message_field(11, encode_contract(contract))
    w.write_int_field(14, timestamp)
    if fee_limit:
        w.write_int_field(18, fee_limit)
    return bytes(w.buf)


def transaction_id(raw_data: bytes) -> str:
    return hashlib.sha256(raw_data).hexdigest()


# --- reader ---


@dataclass
class Reader:
    data: bytes
    pos: int = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def read_varint(self) -> int:
        result = 0
        shift = 0
        while True:
            if self.pos >= len(self.data):
                raise FeeError(ErrorCode.INVALID_FORMAT, "truncated varint")
            byte = self.data[self.pos]
            self.pos += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7
            if shift > 63:
                raise FeeError(ErrorCode.INVALID_FORMAT, "varint too long")

    def read_bytes(self, n: int) -> bytes:
        if self.pos + n > len(self.data):
            raise FeeError(ErrorCode.INVALID_FORMAT, "truncated field")
        out = self.data[self.pos:self.pos + n]
        self.pos += n
        return out

    def read_field(self) -> tuple[int, int, Any]:
        tag = self.read_varint()
        field_number, wire_type = tag >> 3, tag & 0x07
        if wire_type == WIRE_VARINT:
            return field_number, wire_type, self.read_varint()
        if wire_type == WIRE_LEN:
            return field_number, wire_type, self.read_bytes(self.read_varint())
        if wire_type == WIRE_FIXED64:
            return field_number, wire_type, self.read_bytes(8)
        if wire_type == WIRE_FIXED32:
            return field_number, wire_type, self.read_bytes(4)
        raise FeeError(ErrorCode.INVALID_FORMAT, f"unsupported wire type {wire_type}")


def _decode_contract(data: bytes) -> ContractInvocation:
    type_id = 0
    type_url = ""
    value = b""
    r = Reader(data)
    while not r.at_end():
        field_number, _, v = r.read_field()
        if field_number == 1:
            type_id = v
        elif field_number == 2:
            inner = Reader(v)
            while not inner.at_end():
                n, _, iv = inner.read_field()
                if n == 1:
                    type_url = iv.decode()
                elif n == 2:
                    value = iv

    contract_type = _CONTRACT_TYPES_BY_ID.get(type_id)
    if contract_type is None:
        name = type_url.rsplit(".", 1)[-1] if type_url else f"ContractType{type_id}"
        return ContractInvocation(type=name, parameter={})

    fields = {n: (key, kind) for n, key, kind in _CONTRACT_FIELDS[contract_type]}
    parameter: dict[str, Any] = {}
    r = Reader(value)
    while not r.at_end():
        field_number, _, v = r.read_field()
        if field_number not in fields:
            continue
        key, kind = fields[field_number]
        if kind == "int":
            parameter[key] = v
        elif kind == "text":
            parameter[key] = v.decode()
        else:
            parameter[key] = v.hex()
    return ContractInvocation(type=contract_type.value, parameter=parameter)


def decode_contracts(raw_data_hex: str) -> list[ContractInvocation]:
    """Decode the contract list of a serialized `Transaction.raw`."""
    try:
        data = bytes.fromhex(_strip_0x(raw_data_hex))
    except ValueError:
        raise FeeError(ErrorCode.INVALID_FORMAT, "raw_data_hex is not hex") from None

    contracts = []
    r = Reader(data)
    while not r.at_end():
        field_number, wire_type, v = r.read_field()
        if field_number == 11 and wire_type == WIRE_LEN:
            contracts.append(_decode_contract(v))
    return contracts


def _strip_0x(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value
