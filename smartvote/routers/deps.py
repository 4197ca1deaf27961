"""Shared FastAPI dependencies.

The acting user is identified by the ``X-User-Id`` header, which the
front-end sets after a successful ``/users/login``.  Authorization itself is
decided by the services from the actor's effective role.
"""

from typing import Annotated

from fastapi import Depends, Header

from smartvote.services.context import ServiceContext, get_context

Context = Annotated[ServiceContext, Depends(get_context)]

ActorId = Annotated[str, Header(alias="X-User-Id", description="Id of the acting user")]
