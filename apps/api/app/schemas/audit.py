"""Admin audit trail schemas."""

from enum import Enum


class AuditAction(str, Enum):
    UPDATE_USER_STATUS = "UPDATE_USER_STATUS"
    CREATE_POLICY = "CREATE_POLICY"
    DELETE_POLICY = "DELETE_POLICY"
    PROCESS_POLICY_CHANGE_REQUEST = "PROCESS_POLICY_CHANGE_REQUEST"
    UPDATE_CLAIM_STATUS = "UPDATE_CLAIM_STATUS"
    ASSIGN_CLAIM_ADJUSTER = "ASSIGN_CLAIM_ADJUSTER"
