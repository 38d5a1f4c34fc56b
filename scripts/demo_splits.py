"""Walk a payment through a typical edit session and print the splits"""
import sys
from pathlib import Path
from uuid import UUID

# Add parent directory to path to import splitter modules
sys.path.append(str(Path(__file__).parent.parent))

from splitter.core.exceptions import AppException
from splitter.models.events import (AmountChanged, ParticipantsChanged,
                                    PaymentTypeChanged, SplitModeChanged,
                                    SplitPercentageEdited)
from splitter.models.payment import Payment, PaymentType, SplitMode
from splitter.services.recalculation import apply_event, initialize_session
from splitter.services.validation import validate_for_save

ALICE = UUID(int=1)
BOB = UUID(int=2)
CAROL = UUID(int=3)
DAVE = UUID(int=4)


def show(title, session):
    """Print one step of the session"""
    payment = session.payment
    print(f"\n{title}")
    print(f"  {payment.payment_type.value} {payment.amount} {payment.currency} ({payment.split_mode.value})")
    for split in session.splits:
        percentage = f" ({split.percentage}%)" if split.percentage is not None else ""
        print(f"    {split.member_id.int}: {split.amount}{percentage}")


def main():
    """Run the demo session"""
    payment = Payment(amount="10.00", currency="GBP", payer_id=ALICE)
    session = initialize_session(payment, [ALICE, BOB, CAROL], group_members=[ALICE, BOB, CAROL, DAVE])
    show("New payment, split equally", session)

    steps = [
        ("Amount changed to 100.00", AmountChanged(amount="100.00")),
        ("Switched to percentage mode", SplitModeChanged(split_mode=SplitMode.PERCENTAGE)),
        ("Dave joins", ParticipantsChanged(participants=[ALICE, BOB, CAROL, DAVE])),
        ("Bob set to 40%", SplitPercentageEdited(member_id=BOB, percentage="40")),
        ("Switched to unequal mode", SplitModeChanged(split_mode=SplitMode.UNEQUAL)),
        ("Amount changed to 50.00", AmountChanged(amount="50.00")),
        ("Made into a transfer", PaymentTypeChanged(payment_type=PaymentType.TRANSFERRED)),
        ("Back to a spend", PaymentTypeChanged(payment_type=PaymentType.SPENT)),
    ]

    for title, event in steps:
        session = apply_event(session, event)
        show(title, session)

    try:
        validate_for_save(session)
        print("\n✅ Session is valid for saving")
    except AppException as e:
        print(f"\n❌ {e.error_type}: {e.message}")
        raise


if __name__ == "__main__":
    main()
