"""Interactive UI components for picking participants."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .models import Participant

logger = logging.getLogger(__name__)


class ParticipantCompleter(Completer):
    """Fuzzy search completer for event participants."""

    def __init__(self, participants: list[Participant]):
        """Initialize the completer with the event's participants."""
        self.participants = participants
        # Names may repeat within an event, ids may not
        self.label_to_participant = {participant_label(p): p for p in participants}

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for participant in self.participants:
            label = participant_label(participant)
            if not query or fuzzy_match(query, label.lower()):
                yield Completion(
                    text=label,
                    start_position=-len(document.text),
                    display=label,
                )


def participant_label(participant: Participant) -> str:
    """Label shown in completions, e.g. Alice (#1)."""
    return f"{participant.name} (#{participant.id})"


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="aln" matches "alina"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


def select_participant_interactive(
    participants: list[Participant], prompt: str = "Paid by: "
) -> Participant | None:
    """
    Interactive participant selection with fuzzy search.

    Returns:
        Selected participant, or None to cancel
    """
    print("   Type to search, press Enter to confirm, Ctrl+C to cancel\n")

    completer = ParticipantCompleter(participants)
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt(prompt, complete_while_typing=True)

            if not result:
                return None

            participant = completer.label_to_participant.get(result)
            if participant:
                logger.info(f"User selected participant: {participant.name}")
                return participant

            print("❌ Unknown participant. Press Tab to see who is in the event.")

    except KeyboardInterrupt:
        print("\n⏭️  Cancelled")
        return None
    except EOFError:
        return None
