"""
Deck Engine - Draw pile, hand and discard pile operations.

Cards only ever move between the three piles; the multiset of all
card ids is the same after every operation as at deck creation.
Drawing from an empty draw pile reshuffles the discard pile into it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import logging
import random

from ..catalog.catalog import ResourceCatalog
from ..config import BattleRules
from .action import ActionResult, ErrorCode
from .presentation import EventKind, EventQueue
from .state import BattleState, DeckState

if TYPE_CHECKING:
    from .effect_engine import EffectEngine

logger = logging.getLogger(__name__)


@dataclass
class DeckEngine:
    """
    Card pile operations for one battle.

    Usage:
        decks = DeckEngine(catalog, rng=random.Random(7))
        decks.create_deck(battle.deck, progress.equipped_cards)
        decks.draw_for_turn(battle.deck)
        result = decks.play_card(battle, 0, effect_engine)
    """
    catalog: ResourceCatalog
    rules: BattleRules = field(default_factory=BattleRules)
    rng: random.Random = field(default_factory=random.Random)
    events: EventQueue = field(default_factory=EventQueue)

    def create_deck(self, deck: DeckState, equipped: list[str]) -> DeckState:
        """
        Build the draw pile from the equipped cards and shuffle it.

        Unknown card ids are skipped; with nothing usable equipped the
        basic deck is used instead.
        """
        card_ids = []
        for card_id in equipped:
            if self.catalog.get_card(card_id):
                card_ids.append(card_id)
            else:
                logger.warning("Skipping unknown equipped card %s", card_id)

        if not card_ids:
            card_ids = list(self.rules.basic_deck)
            logger.info("No cards equipped, using the basic deck")

        deck.draw_pile = card_ids
        deck.hand = []
        deck.discard_pile = []
        self.shuffle_deck(deck)
        logger.info("Deck created with %d cards", len(card_ids))
        return deck

    def shuffle_deck(self, deck: DeckState):
        """Shuffle the draw pile in place (Fisher-Yates)."""
        self.rng.shuffle(deck.draw_pile)

    def reshuffle_discard_pile(self, deck: DeckState) -> bool:
        """Move the discard pile into the draw pile and shuffle it."""
        if not deck.discard_pile:
            return False
        deck.draw_pile.extend(deck.discard_pile)
        deck.discard_pile = []
        self.shuffle_deck(deck)
        self.events.emit(
            EventKind.DECK_RESHUFFLED,
            "Discard pile shuffled into the deck",
            deck=len(deck.draw_pile),
        )
        return True

    def draw_cards(self, deck: DeckState, count: int = 1) -> list[str]:
        """
        Draw up to `count` cards from the top of the draw pile.

        Returns fewer only when both the draw and discard piles run out.
        """
        drawn: list[str] = []
        for _ in range(max(0, count)):
            if not deck.draw_pile and not self.reshuffle_discard_pile(deck):
                self.events.emit(EventKind.NOTICE, "No cards left to draw")
                logger.info("Deck and discard pile are empty, drew %d of %d", len(drawn), count)
                break
            card_id = deck.draw_pile.pop()
            deck.hand.append(card_id)
            drawn.append(card_id)

        if drawn:
            self.events.emit(EventKind.CARDS_DRAWN, f"Drew {len(drawn)} card(s)", cards=drawn)
        return drawn

    def draw_for_turn(self, deck: DeckState) -> list[str]:
        """Turn-start draw, clamped so the hand never exceeds the hand limit."""
        count = min(self.rules.draw_per_turn, self.rules.hand_limit - len(deck.hand))
        return self.draw_cards(deck, count)

    def play_card(
        self,
        battle: BattleState,
        hand_index: int,
        effect_engine: EffectEngine,
    ) -> ActionResult:
        """
        Play the card at `hand_index`.

        Fails without any state change on a bad index or insufficient mana.
        On success: spends mana, resolves the effect, moves the card to
        the discard pile and counts the play.
        """
        deck = battle.deck
        if not 0 <= hand_index < len(deck.hand):
            logger.warning("Invalid hand index %s (hand size %d)", hand_index, len(deck.hand))
            return ActionResult.failure(
                f"No card at hand index {hand_index}",
                error_code=ErrorCode.INVALID_CARD_INDEX,
            )

        card_id = deck.hand[hand_index]
        card = self.catalog.get_card(card_id)
        if not card:
            return ActionResult.failure(f"Unknown card {card_id}", error_code=ErrorCode.UNKNOWN_CARD)

        player = battle.player
        if not player.use_mana(card.cost):
            self.events.emit(EventKind.NOTICE, "Not enough mana", card_id=card_id)
            return ActionResult.failure(
                f"Not enough mana to play {card.name} ({player.mana}/{card.cost})",
                error_code=ErrorCode.INSUFFICIENT_MANA,
            )

        # The card is in play while its effect resolves
        deck.hand.pop(hand_index)
        self.events.emit(
            EventKind.CARD_PLAYED,
            f"Played {card.name}",
            card_id=card_id,
            cost=card.cost,
            target=card.target.value,
        )
        effect_result = effect_engine.apply_card_effect(battle, card)
        deck.discard_pile.append(card_id)
        battle.stats.cards_played += 1

        changes = [f"Played {card.name}"]
        if effect_result.message:
            changes.append(effect_result.message)
        return ActionResult.success_with_state(battle, changes)

    def discard_card(self, deck: DeckState, hand_index: int) -> str | None:
        if not 0 <= hand_index < len(deck.hand):
            return None
        card_id = deck.hand.pop(hand_index)
        deck.discard_pile.append(card_id)
        self.events.emit(EventKind.CARDS_DISCARDED, "Discarded a card", cards=[card_id])
        return card_id

    def discard_hand(self, deck: DeckState) -> list[str]:
        discarded = list(deck.hand)
        deck.discard_pile.extend(discarded)
        deck.hand = []
        if discarded:
            self.events.emit(
                EventKind.CARDS_DISCARDED,
                f"Discarded {len(discarded)} card(s)",
                cards=discarded,
            )
        return discarded

    def discard_random(self, deck: DeckState, count: int = 1) -> list[str]:
        """Discard up to `count` random cards from the hand."""
        discarded = []
        for _ in range(min(count, len(deck.hand))):
            index = self.rng.randrange(len(deck.hand))
            card_id = deck.hand.pop(index)
            deck.discard_pile.append(card_id)
            discarded.append(card_id)
        if discarded:
            self.events.emit(
                EventKind.CARDS_DISCARDED,
                f"Discarded {len(discarded)} card(s)",
                cards=discarded,
            )
        return discarded

    def get_card_counts(self, deck: DeckState) -> dict[str, int]:
        return deck.counts()
