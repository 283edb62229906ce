"""Flattened view of a DID document.

Spreads the nested verification methods and services into index-aligned
parallel lists for consumers that only handle flat key/value data (tables,
JSON exports). The projection is total and builds a new FlattenedView; the
document is not modified.
"""

from .api_models import FlattenedView
from .models import DidDocument


def project(document: DidDocument) -> FlattenedView:
    """Project a validated document into a FlattenedView.

    For n verification methods, verification_id, verification_type and
    verification_public_key each have n entries and entry i of each comes
    from method i. Services project the same way into the four service_* lists.
    """
    methods = document.verification_methods
    services = document.services
    return FlattenedView(
        account=str(document.account),
        authority=str(document.authority),
        account_version=document.account_version,
        doc_version=document.doc_version,
        controllers=[str(key) for key in document.controllers],
        verification_id=[m.id for m in methods],
        verification_type=[m.type for m in methods],
        verification_public_key=[str(m.public_key) for m in methods],
        authentication=list(document.authentication),
        capability_invocation=list(document.capability_invocation),
        capability_delegation=list(document.capability_delegation),
        key_agreement=list(document.key_agreement),
        assertion_method=list(document.assertion_method),
        service_id=[s.id for s in services],
        service_type=[s.type for s in services],
        service_endpoint=[s.endpoint for s in services],
        service_description=[s.description for s in services],
    )
