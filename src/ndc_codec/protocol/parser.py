"""Field parsers for terminal-to-central messages.

Message, descriptor and status parsers take the ordered list of fields
they are responsible for and the group separator; device parsers take the
device status remainder of a fault field. Every parser returns a plain
dict fragment. Short or missing fields leave the corresponding keys
``None`` instead of failing the whole message; only protocol rejections
and malformed numeric fields raise.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from ..errors import CommandReject, ErrorKind, InvalidNumericField
from ..utils.merge import deep_merge
from .framing import GS, split_groups
from .tables import (
    CARD_READER_STATUSES,
    CASH_HANDLER_STATUSES,
    CLOCK_STATUSES,
    COIN_DISPENSER_STATUSES,
    DEPOSITORY_STATUSES,
    DESCRIPTORS,
    DEVICES,
    ENCRYPTOR_STATUSES,
    JOURNAL_PRINTER_STATUSES,
    NOTE_ACCEPTOR_STATUSES,
    PIN_BLOCK_DIGITS,
    PRODUCTS,
    RECEIPT_PRINTER_STATUSES,
    SENSOR_STATUSES,
    SENSORS,
    SEVERITIES,
    SPECIFIC_ERRORS,
    STATEMENT_PRINTER_STATUSES,
    STATUSES,
    SUPPLIES,
    SUPPLIES_STATUS,
    Descriptor,
    Device,
    StatusType,
)

logger = logging.getLogger(__name__)

Fragment = dict[str, Any]
FieldParser = Callable[[Sequence[str], str], Fragment]
DeviceParser = Callable[[str | None], Fragment]

MESSAGE_PARSERS: dict[str, FieldParser] = {}
DESCRIPTOR_PARSERS: dict[Descriptor, FieldParser] = {}
STATUS_PARSERS: dict[StatusType, FieldParser] = {}
DEVICE_PARSERS: dict[Device, DeviceParser] = {}


def _register(registry: dict, key):
    def decorator(fn):
        registry[key] = fn
        return fn
    return decorator


# ─── HELPERS ──────────────────────────────────────────────────────────

def _take(fields: Sequence[str], count: int) -> list[str | None]:
    """Return exactly ``count`` leading fields, padding with None."""
    taken: list[str | None] = list(fields[:count])
    return taken + [None] * (count - len(taken))


def _char(text: str | None, index: int) -> str:
    if not text:
        return ""
    return text[index:index + 1]


def _lookup(table: Mapping[str, str], text: str | None, index: int) -> str | None:
    return table.get(_char(text, index))


def _map_chars(table: Mapping[str, str], text: str | None) -> list[str | None] | None:
    """Translate every character of ``text``; unmapped codes become None."""
    if text is None:
        return None
    return [table.get(c) for c in text]


def _chunks(text: str | None, size: int, partial: bool = True) -> list[str] | None:
    if not text:
        return None
    chunks = [text[i:i + size] for i in range(0, len(text), size)]
    if not partial:
        chunks = [c for c in chunks if len(c) == size]
    return chunks or None


def _number(text: str, start: int, end: int, name: str) -> int | None:
    """Parse a fixed-offset base-10 field; empty slices are absent."""
    value = text[start:end]
    if not value:
        return None
    if not (value.isascii() and value.isdigit()):
        raise InvalidNumericField(name, value)
    return int(value)


# ─── DEVICES ──────────────────────────────────────────────────────────

def _status_description(table: Mapping[str, str]) -> DeviceParser:
    def parse(status: str | None) -> Fragment:
        if not status:
            return {}
        return {"deviceStatusDescription": _lookup(table, status, 0)}
    return parse


for _device, _table in (
    (Device.CLOCK, CLOCK_STATUSES),
    (Device.CARD_READER, CARD_READER_STATUSES),
    (Device.DEPOSITORY, DEPOSITORY_STATUSES),
    (Device.RECEIPT_PRINTER, RECEIPT_PRINTER_STATUSES),
    (Device.JOURNAL_PRINTER, JOURNAL_PRINTER_STATUSES),
    (Device.ENCRYPTOR, ENCRYPTOR_STATUSES),
    (Device.STATEMENT_PRINTER, STATEMENT_PRINTER_STATUSES),
    (Device.NOTE_ACCEPTOR, NOTE_ACCEPTOR_STATUSES),
):
    DEVICE_PARSERS[_device] = _status_description(_table)


@_register(DEVICE_PARSERS, Device.POWER)
def power(status: str | None) -> Fragment:
    return {"config": status}


@_register(DEVICE_PARSERS, Device.CASH_HANDLER)
def cash_handler(status: str | None) -> Fragment:
    """Cash handler status: description plus notes dispensed per cassette."""
    if not status:
        return {}
    return {
        "deviceStatusDescription": _lookup(CASH_HANDLER_STATUSES, status, 0),
        "dispensed1": status[1:3],
        "dispensed2": status[3:5],
        "dispensed3": status[5:7],
        "dispensed4": status[7:9],
    }


@_register(DEVICE_PARSERS, Device.CAMERA)
@_register(DEVICE_PARSERS, Device.VOICE_GUIDANCE)
def no_status(status: str | None) -> Fragment:
    return {}


_SENSOR_POSITIONS = (
    (1, "supervisorMode"),
    (3, "doorSensor"),
    (4, "silentSignalSensor"),
    (5, "electronicsEnclosureSensor"),
    (6, "depositBin"),
    (7, "cardBin"),
    (8, "rejectBin"),
    (9, "cassette1"),
    (10, "cassette2"),
    (11, "cassette3"),
    (12, "cassette4"),
    (13, "coinDispenser"),
    (14, "coinHopper1"),
    (15, "coinHopper2"),
    (16, "coinHopper3"),
    (17, "coinHopper4"),
    (18, "cpmPockets"),
)


@_register(DEVICE_PARSERS, Device.SENSORS)
def sensors(status: str | None) -> Fragment:
    """Sensor and tamper indicator states.

    Position 0 is the sensor status, position 2 the vibration sensor, which
    is not reported for a sensor change (status ``2``).
    """
    if not status:
        return {}
    result: Fragment = {
        "deviceStatusDescription": _lookup(SENSOR_STATUSES, status, 0),
        "vibrationSensor": (
            _lookup(SENSORS, status, 2) if _char(status, 0) != "2" else None
        ),
    }
    for index, name in _SENSOR_POSITIONS:
        result[name] = _lookup(SENSORS, status, index)
    return result


@_register(DEVICE_PARSERS, Device.SUPERVISOR_KEYS)
def supervisor_keys(status: str | None) -> Fragment:
    return {"menu": status}


@_register(DEVICE_PARSERS, Device.COIN_DISPENSER)
def coin_dispenser(status: str | None) -> Fragment:
    if not status:
        return {}
    return {
        "deviceStatusDescription": _lookup(COIN_DISPENSER_STATUSES, status, 0),
        "coinsDispensed": _chunks(status[1:], 2),
    }


# ─── TERMINAL STATE STATUSES ──────────────────────────────────────────

_CASSETTES = 4

# (name, start, end) of the numeric supply counter fields.
_SUPPLY_COUNTER_FIELDS = (
    ("transactionCount", 5, 12),
    ("notes1", 12, 17),
    ("notes2", 17, 22),
    ("notes3", 22, 27),
    ("notes4", 27, 32),
    ("rejected1", 32, 37),
    ("rejected2", 37, 42),
    ("rejected3", 42, 47),
    ("rejected4", 47, 52),
    ("dispensed1", 52, 57),
    ("dispensed2", 57, 62),
    ("dispensed3", 62, 67),
    ("dispensed4", 67, 72),
    ("last1", 72, 77),
    ("last2", 77, 82),
    ("last3", 82, 87),
    ("last4", 87, 92),
    ("captured", 92, 97),
)


@_register(STATUS_PARSERS, StatusType.SUPPLY_COUNTERS)
def supply_counters(fields: Sequence[str], gs: str = GS) -> Fragment:
    """Supply counters; the notes counts also refresh the session cassettes."""
    (supplies,) = _take(fields, 1)
    if not supplies:
        return {}
    result: Fragment = {"transactionSerialNumber": supplies[1:5]}
    for name, start, end in _SUPPLY_COUNTER_FIELDS:
        result[name] = _number(supplies, start, end, name)
    result["session"] = {
        "cassettes": [
            {"count": result[f"notes{i}"]} for i in range(1, _CASSETTES + 1)
        ],
    }
    return result


@_register(STATUS_PARSERS, StatusType.DATETIME)
def datetime_status(fields: Sequence[str], gs: str = GS) -> Fragment:
    (status,) = _take(fields, 1)
    if not status:
        return {}
    return {"clockStatus": status[:1], "datetime": status[1:]}


@_register(STATUS_PARSERS, StatusType.CONFIGURATION_ID)
def configuration_id(fields: Sequence[str], gs: str = GS) -> Fragment:
    (config,) = _take(fields, 1)
    return {"configId": config[1:] if config else None}


_FITNESS_POSITIONS = (
    (0, "clock"),
    (1, "comms"),
    (2, "disk"),
    (3, "cardReader"),
    (4, "cashHandler"),
    (5, "depository"),
    (6, "receiptPrinter"),
    (7, "journalPrinter"),
    (10, "nightDepository"),
    (11, "encryptor"),
    (12, "camera"),
    (13, "doorAccess"),
    (14, "flexDisk"),
    (15, "cassette1"),
    (16, "cassette2"),
    (17, "cassette3"),
    (18, "cassette4"),
    (21, "statementPrinter"),
    (22, "signageDisplay"),
    (25, "systemDisplay"),
    (26, "mediaEntry"),
    (27, "envelopeDispenser"),
    (28, "documentProcessing"),
    (29, "coinDispenser"),
    (32, "voiceGuidance"),
    (34, "noteAcceptor"),
    (35, "chequeProcessor"),
)

# Offset of the first cassette in the fitness and supplies strings.
_CASSETTE_OFFSET = 15


@_register(STATUS_PARSERS, StatusType.CONFIGURATION)
def configuration(fields: Sequence[str], gs: str = GS) -> Fragment:
    """Configuration information.

    A reply carrying only the status field is the short form and yields
    just the configuration ID.
    """
    if len(fields) < 2:
        return configuration_id(fields, gs)

    config, hw_fitness, hw_config, supplies, sensor_status, release, software_id = (
        _take(fields, 7)
    )
    cassettes = [
        {
            "fitness": _lookup(SEVERITIES, hw_fitness, _CASSETTE_OFFSET + i),
            "supplies": _lookup(SUPPLIES_STATUS, supplies, _CASSETTE_OFFSET + i),
        }
        for i in range(_CASSETTES)
    ]
    result: Fragment = {
        "configId": config[1:] if config else None,
        "session": {"cassettes": cassettes},
        "fitness": None,
        "hwConfig": hw_config,
        "supplies": None,
        "sensors": sensors(" " + sensor_status) if sensor_status else None,
        "release": release,
        "softwareId": software_id,
    }
    if hw_fitness:
        result["fitness"] = {
            name: _lookup(SEVERITIES, hw_fitness, index)
            for index, name in _FITNESS_POSITIONS
        }
    if supplies:
        result["supplies"] = {
            "cardReader": [_lookup(SUPPLIES_STATUS, supplies, 3)],
            "depository": [_lookup(SUPPLIES_STATUS, supplies, 5)],
            "receiptPrinter": [_lookup(SUPPLIES_STATUS, supplies, 6)],
            "journalPrinter": [_lookup(SUPPLIES_STATUS, supplies, 7)],
            "cashHandler": [_lookup(SUPPLIES_STATUS, supplies, 4)] + [
                _lookup(SUPPLIES_STATUS, supplies, _CASSETTE_OFFSET + i)
                for i in range(_CASSETTES)
            ],
        }
    return result


@_register(STATUS_PARSERS, StatusType.HARDWARE)
def hardware(fields: Sequence[str], gs: str = GS) -> Fragment:
    config, product, hardware_configuration = _take(fields, 3)
    product_name = None
    if product:
        code = product[1:]
        product_name = PRODUCTS.get(code) or f"product{code}"
    return {
        "configId": config[2:] if config else None,
        "product": product_name,
        "hardwareConfiguration": split_groups(hardware_configuration, gs),
    }


def _device_groups(
    statuses: str | None, table: Mapping[str, str], gs: str
) -> dict[str, list[str | None]]:
    """Map ``<device code><status chars>`` groups to translated statuses."""
    result: dict[str, list[str | None]] = {}
    for group in split_groups(statuses[2:] if statuses else None, gs):
        device = DEVICES.get(group[:1])
        if device is not None:
            result[device.value] = _map_chars(table, group[1:])
    return result


@_register(STATUS_PARSERS, StatusType.SUPPLIES)
def supplies_status(fields: Sequence[str], gs: str = GS) -> Fragment:
    (statuses,) = _take(fields, 1)
    if not statuses:
        return {}
    return {"suppliesStatus": _device_groups(statuses, SUPPLIES_STATUS, gs)}


@_register(STATUS_PARSERS, StatusType.FITNESS)
def fitness_status(fields: Sequence[str], gs: str = GS) -> Fragment:
    (statuses,) = _take(fields, 1)
    if not statuses:
        return {}
    return {"fitnessStatus": _device_groups(statuses, SEVERITIES, gs)}


@_register(STATUS_PARSERS, StatusType.SENSOR)
def sensor_status(fields: Sequence[str], gs: str = GS) -> Fragment:
    sensor, tamper = _take(fields, 2)
    if not sensor or not tamper:
        return {}
    return sensors(" " + sensor[2:] + tamper[1:])


@_register(STATUS_PARSERS, StatusType.RELEASE)
def release_status(fields: Sequence[str], gs: str = GS) -> Fragment:
    release, software = _take(fields, 2)
    return {
        "release": _chunks(release[2:], 2) if release else None,
        "software": software[1:] if software else None,
    }


@_register(STATUS_PARSERS, StatusType.OPTION_DIGITS)
def option_digits(fields: Sequence[str], gs: str = GS) -> Fragment:
    (digits,) = _take(fields, 1)
    return {"optionDigits": list(digits[2:]) if digits else None}


@_register(STATUS_PARSERS, StatusType.DEPOSIT_DEFINITION)
def deposit_definition(fields: Sequence[str], gs: str = GS) -> Fragment:
    (items,) = _take(fields, 1)
    return {
        "acceptedCashItems": _chunks(items[2:], 11, partial=False) if items else None
    }


# ─── SOLICITED STATUS DESCRIPTORS ─────────────────────────────────────

@_register(DESCRIPTOR_PARSERS, Descriptor.READY)
def ready(fields: Sequence[str], gs: str = GS) -> Fragment:
    return {}


@_register(DESCRIPTOR_PARSERS, Descriptor.TRANSACTION_READY)
def transaction_ready(fields: Sequence[str], gs: str = GS) -> Fragment:
    serial_number, data = _take(fields, 2)
    return {"transactionSerialNumber": serial_number, "transactionData": data}


@_register(DESCRIPTOR_PARSERS, Descriptor.COMMAND_REJECT)
def command_reject(fields: Sequence[str], gs: str = GS) -> Fragment:
    raise CommandReject("Command reject")


@_register(DESCRIPTOR_PARSERS, Descriptor.SPECIFIC_REJECT)
def specific_reject(fields: Sequence[str], gs: str = GS) -> Fragment:
    (status,) = _take(fields, 1)
    raise CommandReject(
        SPECIFIC_ERRORS.get(status or "", "Specific command reject"),
        kind=ErrorKind.SPECIFIC_COMMAND_REJECT,
        code=status,
    )


@_register(DESCRIPTOR_PARSERS, Descriptor.FAULT)
def fault(fields: Sequence[str], gs: str = GS) -> Fragment:
    """Device fault: device identifier, severities, diagnostics and supplies.

    When the device has its own status layout, its parser's fields are
    merged into the result.
    """
    device_and_status, severities, diagnostic_status, supplies = _take(fields, 4)
    device = None
    device_name = None
    device_status = None
    if device_and_status is not None:
        code = device_and_status[:1]
        device = DEVICES.get(code)
        device_name = device.value if device is not None else (code or None)
        device_status = device_and_status[1:]

    result: Fragment = {
        "device": device_name,
        "deviceStatus": device_status,
        "severities": _map_chars(SEVERITIES, severities),
        "diagnosticStatus": diagnostic_status,
        "supplies": _map_chars(SUPPLIES, supplies),
    }
    device_parser = DEVICE_PARSERS.get(device)
    if device_parser is not None:
        deep_merge(result, device_parser(device_status))
    return result


@_register(DESCRIPTOR_PARSERS, Descriptor.STATE)
def state(fields: Sequence[str], gs: str = GS) -> Fragment:
    """Terminal state: the first status character selects the status parser.

    The status parser receives every field, status included, so it can
    tell the short and full forms of a reply apart.
    """
    (status,) = _take(fields, 1)
    status_type = STATUSES.get(_char(status, 0))
    status_parser = STATUS_PARSERS.get(status_type)
    if status_parser is None:
        logger.debug("No status parser for terminal state %r", status)
        return {}
    return deep_merge({"statusType": status_type.value}, status_parser(fields, gs))


# ─── MESSAGE CLASSES ──────────────────────────────────────────────────
# Field 0 is the classification key, field 1 the LUNO, field 2 reserved.

@_register(MESSAGE_PARSERS, "unsolicitedStatus")
def unsolicited_status(fields: Sequence[str], gs: str = GS) -> Fragment:
    return fault(fields[3:], gs)


@_register(MESSAGE_PARSERS, "solicitedStatus")
def solicited_status(fields: Sequence[str], gs: str = GS) -> Fragment:
    """Solicited status: the descriptor field selects the descriptor parser."""
    _, luno, _, descriptor_code = _take(fields, 4)
    descriptor = DESCRIPTORS.get(descriptor_code or "")
    descriptor_parser = DESCRIPTOR_PARSERS.get(descriptor)
    if descriptor_parser is None:
        logger.debug("No descriptor parser for %r", descriptor_code)
        return {}
    return deep_merge(
        {"luno": luno, "descriptor": descriptor.value},
        descriptor_parser(fields[4:], gs),
    )


@_register(MESSAGE_PARSERS, "encryptorIniData")
def encryptor_ini_data(fields: Sequence[str], gs: str = GS) -> Fragment:
    _, _, _, identifier, info = _take(fields, 5)
    if identifier == "4":
        return {"masterKvv": info[:6] if info is not None else None}
    if identifier == "3":
        return {"newKvv": info[:6] if info is not None else None}
    return {}


@_register(MESSAGE_PARSERS, "uploadEjData")
def upload_ej_data(fields: Sequence[str], gs: str = GS) -> Fragment:
    message_type, luno, _, _, journal_data = _take(fields, 5)
    return {"type": message_type, "luno": luno, "journalData": journal_data}


@_register(MESSAGE_PARSERS, "transaction")
def transaction(fields: Sequence[str], gs: str = GS) -> Fragment:
    """Transaction request from a cardholder session."""
    (
        message_type, luno, reserved, time_variant_number, receipt_and_coordination,
        track2, track3, opcode, amount, pin, buffer_b, buffer_c,
    ) = _take(fields, 12)
    return {
        "type": message_type,
        "luno": luno,
        "reserved": reserved,
        "timeVariantNumber": time_variant_number,
        "topOfReceipt": _char(receipt_and_coordination, 0) or None,
        "coordination": _char(receipt_and_coordination, 1) or None,
        "track2": track2,
        "track3": track3,
        "opcode": list(opcode) if opcode is not None else None,
        "amount": amount,
        "pinBlock": (
            "".join(PIN_BLOCK_DIGITS.get(c, c) for c in pin)
            if pin is not None else None
        ),
        "bufferB": buffer_b,
        "bufferC": buffer_c,
    }


# Every parser reachable by method name. Catalog entries may name any
# message, descriptor or status parser.
PARSERS: dict[str, FieldParser] = {
    **{status_type.value: fn for status_type, fn in STATUS_PARSERS.items()},
    **{descriptor.value: fn for descriptor, fn in DESCRIPTOR_PARSERS.items()},
    **MESSAGE_PARSERS,
}


def parser_for(method: str) -> FieldParser | None:
    """Return the parser registered for a catalog method, if any."""
    return PARSERS.get(method)
