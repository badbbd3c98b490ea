from bikewerkstatt.admin.auth import CredentialVerifier, StaticPinVerifier
from bikewerkstatt.admin.dashboard import AdminAuthError, AdminDashboard

__all__ = ["AdminDashboard", "AdminAuthError", "CredentialVerifier", "StaticPinVerifier"]
