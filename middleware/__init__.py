from .auth_gate import AuthorizationGate, SessionResolver, Principal

__all__ = ["AuthorizationGate", "SessionResolver", "Principal"]
