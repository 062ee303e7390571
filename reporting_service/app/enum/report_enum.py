from enum import Enum


class ReportType(str, Enum):
    RENT_ROLL = "rent_roll"
    ASSET_TAPE = "asset_tape"
    BOTH = "both"


class SheetName(str, Enum):
    RENT_ROLL = "Rent Roll"
    ASSET_TAPE = "Asset Tape"


class FundName(str, Enum):
    CORE_FUND_I = "Core Fund I"
    CORE_FUND_II = "Core Fund II"
    VALUE_ADD_FUND = "Value Add Fund"
    OPPORTUNITY_FUND = "Opportunity Fund"


class OperatorCode(str, Enum):
    OP_NORTH = "north"
    OP_SOUTH = "south"
    OP_EAST = "east"
    OP_WEST = "west"


# Fixed ids of the operator partners in the ERP, no lookup needed
OPERATOR_CODE_TO_ID = {
    OperatorCode.OP_NORTH: 11,
    OperatorCode.OP_SOUTH: 12,
    OperatorCode.OP_EAST: 13,
    OperatorCode.OP_WEST: 14,
}

M2M = "M2M"
