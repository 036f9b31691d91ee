"""
AI move oracle: asks a chat-completions style HTTP endpoint (OpenAI compatible wire format) for the next move.

The oracle is unreliable by nature. It only ever returns a move *string*,
which must be parsed and validated by the rules engine before anything is played.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from src.core.config import OracleSettings
from src.core.exceptions import OracleError
from src.core.shared_types import GameKind

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant that plays board games."

CHESS_PROMPT = """Role: you are a chess grandmaster who follows the FIDE rules and writes moves in Standard Algebraic Notation (SAN) only.

SAN rules:
1. K=king, Q=queen, R=rook, B=bishop, N=knight, pawns have no letter
2. Moves: piece + destination square (ex. Nf3); pawns only the destination square (ex. e4)
3. Captures use x (ex. Bxe5, exd5)
4. Ambiguity: add the origin file and/or rank (ex. Rae1)
5. Special: O-O castles king side, O-O-O queen side, promotion uses = (ex. e8=Q)
6. + marks check, # marks checkmate

Current game:
FEN: {fen}
Moves so far: {history}
Side to move: {side}

Instruction: give the best legal next move. Output ONLY the SAN string, nothing else."""

XIANGQI_PROMPT = """Role: you are a professional Xiangqi (Chinese Chess) player who reads and writes UCCI notation.

Board coordinates: files a-i from left to right as seen by red, ranks 0-9 counted from red's back rank (0) up to black's back rank (9).
A move is written as origin + destination, ex. h2e2. Captures need no extra mark.

Piece rules:
- Chariot: any distance horizontally or vertically, no jumping.
- Horse: one step orthogonally then one step diagonally outwards; blocked if the first step is occupied.
- Cannon: moves like a chariot; captures by jumping over exactly one piece.
- Soldier: one step forward; after crossing the river also one step sideways; never backwards.
- Elephant: exactly two steps diagonally, never crosses the river, blocked if the midpoint is occupied.
- Advisor: one step diagonally inside the palace.
- General: one step orthogonally inside the palace; the two generals may never face each other on an open file.

Current game:
FEN: {fen}
Moves so far: {history}
Side to move: {side}

Instruction: give the best legal next move. Output ONLY the UCCI move string, nothing else."""

SIDE_NAMES: dict[GameKind, dict[str, str]] = {
    GameKind.CHESS: {"w": "white", "b": "black"},
    GameKind.XIANGQI: {"w": "red", "b": "black"},
}


@dataclass(frozen=True)
class OracleSuggestion:
    """A move suggestion, tagged with the FEN the request was issued against."""

    fen: str
    move: str


class MoveOracle(Protocol):
    """Anything that can suggest a move for a given position"""

    def suggest_move(
        self, kind: GameKind, fen: str, history: list[str], side: str
    ) -> OracleSuggestion: ...


def build_prompt(kind: GameKind, fen: str, history: list[str], side: str) -> str:
    """`side` is the FEN side-to-move code ('w' or 'b')"""
    template = CHESS_PROMPT if kind == GameKind.CHESS else XIANGQI_PROMPT
    return template.format(
        fen=fen,
        history=" ".join(history) or "(none)",
        side=SIDE_NAMES[kind][side],
    )


def extract_move(content: str) -> str:
    """The reply may contain more than the move: keep the first token, without trailing periods/commas."""
    tokens = content.split()
    if not tokens:
        return ""
    return tokens[0].rstrip(".,")


class ChatOracle:
    """Calls `<base_url>/chat/completions` once per request. No retries."""

    def __init__(
        self, settings: OracleSettings, client: Optional[httpx.Client] = None
    ) -> None:
        self.settings = settings
        self.client = client or httpx.Client(timeout=settings.timeout)

    def suggest_move(
        self, kind: GameKind, fen: str, history: list[str], side: str
    ) -> OracleSuggestion:
        if not self.settings.is_complete():
            raise OracleError(
                "Oracle settings are incomplete: base url, api key and model are all required."
            )

        url = f"{self.settings.base_url.rstrip('/')}/chat/completions"
        payload = {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(kind, fen, history, side)},
            ],
            "temperature": self.settings.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

        logger.info("Asking oracle %s for a %s move", self.settings.model, kind)
        try:
            response = self.client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise OracleError(f"Oracle request failed: {exc}") from exc
        except ValueError as exc:
            raise OracleError("Oracle response is not valid JSON.") from exc

        content = self._message_content(data)
        move = extract_move(content)
        logger.info("Oracle suggested %r", move)
        return OracleSuggestion(fen=fen, move=move)

    def close(self) -> None:
        self.client.close()

    def _message_content(self, data: object) -> str:
        try:
            content = data["choices"][0]["message"]["content"]  # type: ignore[index]
        except (KeyError, IndexError, TypeError) as exc:
            raise OracleError(f"Unexpected oracle response: {data!r}") from exc
        if not isinstance(content, str):
            raise OracleError(f"Unexpected oracle message content: {content!r}")
        return content.strip()
