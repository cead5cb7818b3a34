"""Caller identity for Ordering routes.

The bearer token is handed to the ``ClaimsExtractor`` stored on
``app.state.claims_extractor``; this service never inspects it.
"""

from fastapi import Depends, Header, HTTPException, Request
from identity.auth.claims import Claims
from identity.auth.errors import InvalidCredentialsError

_BEARER_PREFIX = "Bearer "


def current_claims(request: Request, authorization: str | None = Header(default=None)) -> Claims:
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Missing bearer token")

    token = authorization[len(_BEARER_PREFIX) :].strip()
    try:
        return request.app.state.claims_extractor.extract(token)
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=exc.message) from exc


def seller_claims(claims: Claims = Depends(current_claims)) -> Claims:
    if not claims.is_seller():
        raise HTTPException(status_code=403, detail="Seller role required")
    return claims
