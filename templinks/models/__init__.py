from templinks.models.link_model import ExpirationMode, LinkModel, OutcomeKind, VisitOutcome


__all__ = [
    'ExpirationMode',
    'LinkModel',
    'OutcomeKind',
    'VisitOutcome',
]
