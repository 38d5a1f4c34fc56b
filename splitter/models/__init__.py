"""Domain models"""
from splitter.models.payment import Payment, PaymentType, SplitMode
from splitter.models.session import PaymentEditSession
from splitter.models.split import Split

__all__ = ["Payment", "PaymentType", "SplitMode", "Split", "PaymentEditSession"]
