from account_api.models.account import Account
from account_api.models.jwt_token import JwtToken
from account_api.models.prefecture import Prefecture

__all__ = [
    "Account",
    "JwtToken",
    "Prefecture",
]
