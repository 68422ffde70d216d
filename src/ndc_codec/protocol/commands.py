"""Message type identifiers and the default NDC message format catalog.

Each format lists its fields in wire order as a comma-separated string
(``FS`` marks a field separator) and carries the fixed values that
identify it: ``messageClass`` and ``messageSubclass`` together form the
classification key matched against the first token of a received
message.
"""

from __future__ import annotations

from enum import Enum


class Mtid(str, Enum):
    """Message type of a decoded or encoded message."""

    REQUEST = "request"
    RESPONSE = "response"
    UNSOLICITED = "unsolicited"
    ERROR = "error"


class TerminalCommandCode(str, Enum):
    """Command codes of the central-to-terminal terminal command."""

    GO_IN_SERVICE = "1"
    GO_OUT_OF_SERVICE = "2"
    SEND_CONFIGURATION_ID = "3"
    SEND_SUPPLY_COUNTERS = "4"
    SEND_CONFIGURATION = "7"


# Command modifiers of SEND_CONFIGURATION selecting an enhanced report.
CONFIGURATION_MODIFIERS: dict[str, str] = {
    "sendConfigurationHardware": "1",
    "sendConfigurationSupplies": "2",
    "sendConfigurationFitness": "3",
    "sendConfigurationSensor": "4",
    "sendConfigurationRelease": "5",
    "sendConfigurationEnhanced": "6",
    "sendConfigurationOptionDigits": "7",
    "sendConfigurationDepositDefinition": "8",
}

_TERMINAL_COMMAND_FIELDS = (
    "messageClass,FS,luno,FS,messageSequenceNumber,FS,"
    "commandCode,commandModifier"
)
_CUSTOMIZATION_FIELDS = (
    "messageClass,responseFlag,FS,luno,FS,messageSequenceNumber,FS,"
    "messageSubclass,messageIdentifier"
)
_KEY_FIELDS = (
    "messageClass,responseFlag,FS,luno,FS,messageSequenceNumber,FS,"
    "messageSubclass,keyModifier"
)
_EMV_FIELDS = (
    "messageClass,responseFlag,FS,luno,FS,messageSequenceNumber,FS,"
    "messageSubclass"
)


def _terminal_command(code: str, modifier: str = "") -> dict:
    return {
        "fields": _TERMINAL_COMMAND_FIELDS,
        "mtid": Mtid.REQUEST.value,
        "values": {
            "messageClass": "1",
            "commandCode": code,
            "commandModifier": modifier,
        },
    }


def _customization(identifier: str, data_fields: str) -> dict:
    return {
        "fields": f"{_CUSTOMIZATION_FIELDS},FS,{data_fields}",
        "mtid": Mtid.REQUEST.value,
        "values": {
            "messageClass": "3",
            "messageSubclass": "1",
            "messageIdentifier": identifier,
        },
    }


def _key_change(modifier: str, data_fields: str = "") -> dict:
    fields = f"{_KEY_FIELDS},FS,{data_fields}" if data_fields else _KEY_FIELDS
    return {
        "fields": fields,
        "mtid": Mtid.REQUEST.value,
        "values": {
            "messageClass": "3",
            "messageSubclass": "4",
            "keyModifier": modifier,
        },
    }


def _emv(subclass: str, data_field: str) -> dict:
    return {
        "fields": f"{_EMV_FIELDS},FS,{data_field}",
        "mtid": Mtid.REQUEST.value,
        "values": {"messageClass": "8", "messageSubclass": subclass},
    }


DEFAULT_MESSAGE_FORMAT: dict[str, dict] = {
    # terminal to central
    "transaction": {
        "fields": (
            "messageClass,messageSubclass,FS,luno,FS,FS,timeVariantNumber,FS,"
            "topOfReceipt,coordination,FS,track2,FS,track3,FS,opcode,FS,"
            "amount,FS,pinBlock,FS,bufferB,FS,bufferC"
        ),
        "mtid": Mtid.REQUEST.value,
        "values": {"messageClass": "1", "messageSubclass": "1"},
    },
    "unsolicitedStatus": {
        "fields": (
            "messageClass,messageSubclass,FS,luno,FS,FS,"
            "deviceIdentifierAndStatus,FS,errorSeverity,FS,"
            "diagnosticStatus,FS,suppliesStatus"
        ),
        "mtid": Mtid.UNSOLICITED.value,
        "values": {"messageClass": "1", "messageSubclass": "2"},
    },
    "solicitedStatus": {
        "fields": "messageClass,messageSubclass,FS,luno,FS,FS,descriptor,FS,status",
        "mtid": Mtid.RESPONSE.value,
        "values": {"messageClass": "2", "messageSubclass": "2"},
    },
    "encryptorIniData": {
        "fields": (
            "messageClass,messageSubclass,FS,luno,FS,FS,"
            "informationIdentifier,FS,information"
        ),
        "mtid": Mtid.RESPONSE.value,
        "values": {"messageClass": "2", "messageSubclass": "3"},
    },
    "uploadEjData": {
        "fields": "messageClass,messageSubclass,FS,luno,FS,FS,FS,journalData",
        "mtid": Mtid.UNSOLICITED.value,
        "values": {"messageClass": "6", "messageSubclass": "1"},
    },

    # central to terminal: terminal commands
    "terminalCommand": _terminal_command(""),
    "goInService": _terminal_command(TerminalCommandCode.GO_IN_SERVICE.value),
    "goOutOfService": _terminal_command(TerminalCommandCode.GO_OUT_OF_SERVICE.value),
    "sendConfigurationId": _terminal_command(
        TerminalCommandCode.SEND_CONFIGURATION_ID.value
    ),
    "sendSupplyCounters": _terminal_command(
        TerminalCommandCode.SEND_SUPPLY_COUNTERS.value
    ),
    "sendConfiguration": _terminal_command(
        TerminalCommandCode.SEND_CONFIGURATION.value
    ),
    **{
        name: _terminal_command(TerminalCommandCode.SEND_CONFIGURATION.value, modifier)
        for name, modifier in CONFIGURATION_MODIFIERS.items()
    },

    # central to terminal: customisation data
    "screenDataLoad": _customization("1", "screens"),
    "stateTableLoad": _customization("2", "states"),
    "paramsLoadEnhanced": _customization("A", "options,FS,timers"),
    "fitDataLoad": _customization("5", "fitData"),
    "configIdLoad": _customization("6", "configId"),
    "dateTimeLoad": _customization("C", "datetime"),
    "currencyMappingLoad": _customization("I", "currencyMapping"),

    # central to terminal: EMV configuration
    "emvCurrency": _emv("1", "currencyData"),
    "emvTransaction": _emv("2", "transactionData"),
    "emvLanguage": _emv("3", "languageData"),
    "emvTerminal": _emv("4", "terminalData"),
    "emvApplication": _emv("5", "applicationData"),

    # central to terminal: key management
    "keyReadKvv": _key_change("4"),
    "keyChangeTpk": _key_change("2", "tpk"),
    "keyChangeTak": _key_change("5", "tak"),

    # central to terminal: transaction reply
    "transactionReply": {
        "fields": (
            "messageClass,responseFlag,FS,luno,FS,messageSequenceNumber,FS,"
            "nextState,FS,notesToDispense,FS,transactionSerialNumber,"
            "functionIdentifier,screenNumber,screenDisplayUpdate,FS,"
            "messageCoordinationNumber,cardReturnFlag,printerFlag,printerData"
        ),
        "mtid": Mtid.REQUEST.value,
        "values": {"messageClass": "4"},
    },
}


# Outgoing methods sharing the central command trace counter.
CENTRAL_METHODS = frozenset({
    "terminalCommand",
    "goInService",
    "goOutOfService",
    "sendConfigurationId",
    "sendSupplyCounters",
    "paramsLoadEnhanced",
    "currencyMappingLoad",
    "stateTableLoad",
    "screenDataLoad",
    "fitDataLoad",
    "dateTimeLoad",
    "configIdLoad",
    "sendConfiguration",
    *CONFIGURATION_MODIFIERS,
    "emvCurrency",
    "emvTransaction",
    "emvLanguage",
    "emvTerminal",
    "emvApplication",
})

KEY_METHODS = frozenset({"keyReadKvv", "keyChangeTak", "keyChangeTpk"})

TRANSACTION_REPLY_METHODS = frozenset({"transactionReply"})
