"""Code tables translating single-character protocol codes to names.

The tables are read-only data. Dispatch keys (devices, solicited status
descriptors and terminal state status types) are closed enumerations so
the parser library can key its handler registries by them.
"""

from __future__ import annotations

from enum import Enum


class Device(str, Enum):
    """Device identifier graphics carried in fault and status messages."""

    CLOCK = "clock"
    POWER = "power"
    CARD_READER = "cardReader"
    CASH_HANDLER = "cashHandler"
    DEPOSITORY = "depository"
    RECEIPT_PRINTER = "receiptPrinter"
    JOURNAL_PRINTER = "journalPrinter"
    NIGHT_DEPOSITORY = "nightDepository"
    ENCRYPTOR = "encryptor"
    CAMERA = "camera"
    DOOR_ACCESS = "doorAccess"
    FLEX_DISK = "flexDisk"
    SENSORS = "sensors"
    TOUCH_SCREEN_KEYBOARD = "touchScreenKeyboard"
    SUPERVISOR_KEYS = "supervisorKeys"
    CARDHOLDER_DISPLAY = "cardholderDisplay"
    STATEMENT_PRINTER = "statementPrinter"
    SIGNAGE_DISPLAY = "signageDisplay"
    SYSTEM_DISPLAY = "systemDisplay"
    MEDIA_ENTRY = "mediaEntry"
    ENVELOPE_DISPENSER = "envelopeDispenser"
    DOCUMENT_PROCESSING = "documentProcessing"
    COIN_DISPENSER = "coinDispenser"
    VOICE_GUIDANCE = "voiceGuidance"
    NOTE_ACCEPTOR = "noteAcceptor"
    CHEQUE_PROCESSOR = "chequeProcessor"


class Descriptor(str, Enum):
    """Solicited status descriptors."""

    FAULT = "fault"
    READY = "ready"
    COMMAND_REJECT = "commandReject"
    TRANSACTION_READY = "transactionReady"
    SPECIFIC_REJECT = "specificReject"
    STATE = "state"


class StatusType(str, Enum):
    """Terminal state message status information types."""

    CONFIGURATION = "configuration"
    SUPPLY_COUNTERS = "supplyCounters"
    DATETIME = "datetime"
    CONFIGURATION_ID = "configurationId"
    HARDWARE = "hardware"
    SUPPLIES = "supplies"
    FITNESS = "fitness"
    SENSOR = "sensor"
    RELEASE = "release"
    OPTION_DIGITS = "optionDigits"
    DEPOSIT_DEFINITION = "depositDefinition"


DEVICES: dict[str, Device] = {
    "A": Device.CLOCK,
    "B": Device.POWER,
    "D": Device.CARD_READER,
    "E": Device.CASH_HANDLER,
    "F": Device.DEPOSITORY,
    "G": Device.RECEIPT_PRINTER,
    "H": Device.JOURNAL_PRINTER,
    "K": Device.NIGHT_DEPOSITORY,
    "L": Device.ENCRYPTOR,
    "M": Device.CAMERA,
    "N": Device.DOOR_ACCESS,
    "O": Device.FLEX_DISK,
    "P": Device.SENSORS,
    "Q": Device.TOUCH_SCREEN_KEYBOARD,
    "R": Device.SUPERVISOR_KEYS,
    "S": Device.CARDHOLDER_DISPLAY,
    "V": Device.STATEMENT_PRINTER,
    "W": Device.SIGNAGE_DISPLAY,
    "Y": Device.COIN_DISPENSER,
    "Z": Device.SYSTEM_DISPLAY,
    "[": Device.MEDIA_ENTRY,
    "\\": Device.ENVELOPE_DISPENSER,
    "]": Device.DOCUMENT_PROCESSING,
    "a": Device.VOICE_GUIDANCE,
    "q": Device.NOTE_ACCEPTOR,
    "w": Device.CHEQUE_PROCESSOR,
}

DESCRIPTORS: dict[str, Descriptor] = {
    "8": Descriptor.FAULT,
    "9": Descriptor.READY,
    "A": Descriptor.COMMAND_REJECT,
    "B": Descriptor.TRANSACTION_READY,
    "C": Descriptor.SPECIFIC_REJECT,
    "F": Descriptor.STATE,
}

# Descriptor code of a "ready" reply to a transaction reply command.
TRANSACTION_READY_CODE = "B"

STATUSES: dict[str, StatusType] = {
    "1": StatusType.CONFIGURATION,
    "2": StatusType.SUPPLY_COUNTERS,
    "5": StatusType.DATETIME,
    "6": StatusType.CONFIGURATION_ID,
    "H": StatusType.HARDWARE,
    "I": StatusType.SUPPLIES,
    "J": StatusType.FITNESS,
    "K": StatusType.SENSOR,
    "L": StatusType.RELEASE,
    "M": StatusType.OPTION_DIGITS,
    "N": StatusType.DEPOSIT_DEFINITION,
}

SEVERITIES: dict[str, str] = {
    "0": "noError",
    "1": "routine",
    "2": "warning",
    "3": "suspend",
    "4": "fatal",
}

# Supplies status as reported alongside a device fault.
SUPPLIES: dict[str, str] = {
    "0": "noNewState",
    "1": "sufficient",
    "2": "low",
    "3": "out",
    "4": "overfill",
}

# Supplies status as reported in configuration information.
SUPPLIES_STATUS: dict[str, str] = {
    "0": "notConfigured",
    "1": "sufficient",
    "2": "low",
    "3": "out",
    "4": "overfill",
}

SENSORS: dict[str, str] = {
    "0": "inactive",
    "1": "active",
}

SENSOR_STATUSES: dict[str, str] = {
    "1": "tamperIndicatorChange",
    "2": "sensorChange",
    "3": "alarmStateChange",
}

CLOCK_STATUSES: dict[str, str] = {
    "1": "clockResetButRunning",
    "2": "clockStopped",
}

CARD_READER_STATUSES: dict[str, str] = {
    "0": "noException",
    "1": "cardNotTaken",
    "2": "mispositionedCard",
    "3": "invalidTrack3Data",
    "4": "cardCaptured",
    "5": "cardNotCaptured",
    "6": "cardJammed",
    "7": "invalidTrackData",
    "8": "cardPartiallyCaptured",
    "9": "jammedCardRemoved",
}

CASH_HANDLER_STATUSES: dict[str, str] = {
    "0": "successfulOperation",
    "1": "shortDispense",
    "2": "noNotesDispensed",
    "3": "notesDispensedUnknown",
    "4": "noNotesDispensedOrCardNotEjected",
    "5": "someNotesRetracted",
}

DEPOSITORY_STATUSES: dict[str, str] = {
    "0": "successfulOperation",
    "1": "timeOut",
    "2": "failedToEnable",
    "3": "envelopeDepositFailed",
    "4": "shutterFailed",
}

RECEIPT_PRINTER_STATUSES: dict[str, str] = {
    "0": "successfulPrint",
    "1": "printOperationNotCompleted",
    "2": "deviceNotConfigured",
    "4": "cancelledWhilePrinting",
    "5": "mediaJammed",
}

JOURNAL_PRINTER_STATUSES: dict[str, str] = {
    "0": "successfulPrint",
    "1": "printOperationNotCompleted",
    "2": "deviceNotConfigured",
    "6": "journalBackupActive",
    "7": "journalReprinted",
}

ENCRYPTOR_STATUSES: dict[str, str] = {
    "1": "encryptorError",
    "2": "encryptorNotConfigured",
}

STATEMENT_PRINTER_STATUSES: dict[str, str] = {
    "0": "successfulPrint",
    "1": "printOperationNotCompleted",
    "2": "deviceNotConfigured",
    "3": "statementNotTaken",
    "4": "statementCaptured",
}

COIN_DISPENSER_STATUSES: dict[str, str] = {
    "0": "successfulOperation",
    "1": "coinDispenseFault",
    "2": "noCoinsDispensed",
    "3": "coinsDispensedUnknown",
}

NOTE_ACCEPTOR_STATUSES: dict[str, str] = {
    "0": "successfulOperation",
    "1": "invalidNotes",
    "2": "notesReturned",
    "3": "notesRetained",
    "4": "escrowFull",
}

SPECIFIC_ERRORS: dict[str, str] = {
    "A": "Message length error",
    "B": "Field value error",
    "C": "Illegal message type",
    "D": "Hardware failure",
    "E": "Invalid state number",
    "F": "Transaction reply during power failure",
    "G": "Encryption failure during transaction reply",
    "H": "MAC failure",
}

PRODUCTS: dict[str, str] = {
    "01": "personas70",
    "02": "personas72",
    "03": "personas74",
    "04": "personas75",
    "05": "personas76",
    "06": "personas77",
    "07": "personas84",
    "08": "personas85",
    "09": "personas86",
    "10": "personas87",
    "11": "personas88",
    "12": "personas90",
    "13": "selfServ6622",
    "14": "selfServ6625",
    "15": "selfServ6626",
    "16": "selfServ6632",
    "17": "selfServ6634",
    "18": "selfServ6638",
}

# The terminal sends PIN block hex digits A-F as the characters ':' to '?'.
PIN_BLOCK_DIGITS: dict[str, str] = {
    ":": "A",
    ";": "B",
    "<": "C",
    "=": "D",
    ">": "E",
    "?": "F",
}
