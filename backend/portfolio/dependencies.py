# backend/portfolio/dependencies.py
from fastapi import HTTPException, Request

from portfolio.core.contact_store import ContactStore
from portfolio.core.mailer import Mailer


def get_mailer(request: Request) -> Mailer:
    mailer = getattr(request.app.state, "mailer", None)
    if mailer is None:
        raise HTTPException(status_code=503, detail="Mailer is not initialised")
    return mailer


def get_contact_store(request: Request) -> ContactStore:
    store = getattr(request.app.state, "contact_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Contact store is not initialised")
    return store
