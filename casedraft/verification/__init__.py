from casedraft.verification.authenticity import AuthenticityHeuristics, generate_verification_email
from casedraft.verification.models import Verdict, VerificationVerdict
from casedraft.verification.service import DocumentVerificationService

__all__ = [
    "AuthenticityHeuristics",
    "DocumentVerificationService",
    "Verdict",
    "VerificationVerdict",
    "generate_verification_email",
]
