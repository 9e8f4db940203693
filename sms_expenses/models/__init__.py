from .transaction_models import (
    Direction,
    DirectionUpdate,
    ParsedTransaction,
    RawMessage,
    ScreenPhase,
    ScreenSnapshot,
    SearchUpdate,
    TransactionCard,
    TransactionType,
)
