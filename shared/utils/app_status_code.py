class AppStatusCode:
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_FAILED = "101"
    INVALID_INPUT = "102"
    NOT_FOUND = "104"
    UPSTREAM_FAILED = "105"
