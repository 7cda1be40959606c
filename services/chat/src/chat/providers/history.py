"""History normalization shared by every provider.

Providers differ in role vocabulary but agree on the shape of what they are
sent: a recent window of turns that starts with the user and alternates.
"""

from typing import List, Sequence

from ..models import ConversationTurn, Role


def trim_history(
    history: Sequence[ConversationTurn], window: int
) -> List[ConversationTurn]:
    """Drop blank turns and keep the last `window` of the rest."""
    turns = [turn for turn in history if turn.content and turn.content.strip()]
    if window <= 0:
        return []
    return turns[-window:]


def collapse_repeated_roles(turns: Sequence[ConversationTurn]) -> List[ConversationTurn]:
    """Merge consecutive turns of the same role into one turn."""
    collapsed: List[ConversationTurn] = []
    for turn in turns:
        if collapsed and collapsed[-1].role == turn.role:
            previous = collapsed.pop()
            turn = previous.model_copy(
                update={"content": f"{previous.content}\n\n{turn.content}"}
            )
        collapsed.append(turn)
    return collapsed


def normalize_history(
    history: Sequence[ConversationTurn], message: str, window: int = 10
) -> List[ConversationTurn]:
    """Build the turn list to submit for `message`.

    Args:
        history: Prior turns, oldest first.
        message: The current user message.
        window: How many recent turns of `history` to keep.

    Returns:
        Strictly alternating turns, starting and ending with a user turn.
        When the trimmed history is empty or does not start with the user,
        only the current message is returned.
    """
    current = ConversationTurn(role=Role.USER, content=message)
    trimmed = trim_history(history, window)

    if not trimmed or trimmed[0].role != Role.USER:
        return [current]

    return collapse_repeated_roles([*trimmed, current])
