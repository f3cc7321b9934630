"""Domain service: Recipe Conversion Workflow.

Turns stock of one product into stock of another. A recipe conversion runs
in two steps: ``initiate`` deducts the input and records the expected
output, then ``complete`` records what was actually produced, computes the
variance and credits the output product. ``cancel`` undoes the deduction
of a conversion that never completed.

Stock changes for a single (product, location) record are serialized with
a per-key lock so two conversions drawing from the same record can never
overdraw it. Completing or cancelling a conversion is serialized per
conversion the same way.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from stockflow.domain.events import (
    ConversionCancelled,
    ConversionCompleted,
    ConversionInitiated,
    EventPublisher,
    NullPublisher,
)
from stockflow.domain.exceptions import (
    ConversionRejected,
    DomainException,
    InsufficientStock,
    RecipeNotFound,
    RecordNotFound,
    ValidationError,
)
from stockflow.domain.model.conversion import ConversionRecord
from stockflow.domain.model.inventory import InventoryRecord
from stockflow.domain.model.recipe import Recipe
from stockflow.domain.model.value_objects import ZERO, Quantity, to_decimal
from stockflow.domain.model.variance import ConversionStats
from stockflow.domain.repository.conversion_repository import ConversionRepository
from stockflow.domain.repository.inventory_store import InventoryStore
from stockflow.domain.repository.recipe_catalog import RecipeCatalog
from stockflow.domain.repository.variance_reason_repository import (
    VarianceReasonRepository,
)
from stockflow.domain.service.keyed_lock import KeyedLock

logger = logging.getLogger(__name__)

Number = str | int | float | Decimal


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class ConversionWorkflow:

    def __init__(
        self,
        inventory: InventoryStore,
        recipes: RecipeCatalog,
        conversions: ConversionRepository,
        publisher: EventPublisher | None = None,
        variance_reasons: VarianceReasonRepository | None = None,
        locks: KeyedLock | None = None,
    ) -> None:
        self._inventory = inventory
        self._recipes = recipes
        self._conversions = conversions
        self._publisher = publisher or NullPublisher()
        self._variance_reasons = variance_reasons
        self._locks = locks or KeyedLock()

    # --- Validation -----------------------------------------------------------

    def validate(
        self,
        recipe_id: int,
        input_product_id: int,
        location_id: int,
        input_quantity: Number,
    ) -> ValidationResult:
        """Check whether a conversion could start right now.

        Side-effect free, so it is safe to call on every keystroke of a
        form. Collects every problem instead of stopping at the first.
        """
        errors: list[str] = []
        warnings: list[str] = []

        recipe = self._recipes.get(recipe_id)
        if recipe is None:
            errors.append(f"Recipe #{recipe_id} not found")
        elif not recipe.is_active:
            errors.append(f"Recipe '{recipe.name}' is not active")

        quantity: Decimal | None
        try:
            quantity = to_decimal(input_quantity, "input quantity")
        except ValidationError as exc:
            errors.append(str(exc))
            quantity = None
        if quantity is not None and quantity <= ZERO:
            errors.append("Input quantity must be greater than zero")
            quantity = None

        record = self._inventory.get(input_product_id, location_id)
        if record is None:
            errors.append(
                f"No inventory record for product {input_product_id} "
                f"at location {location_id}"
            )
        elif quantity is not None:
            if quantity > record.available_quantity:
                errors.append(
                    f"Insufficient stock: need {quantity}, have "
                    f"{record.available_quantity} available"
                )
            elif quantity == record.available_quantity:
                warnings.append("Conversion will use all available stock at this location")

        if recipe is not None and recipe.expected_yield_ratio is not None and not recipe.track_variance:
            warnings.append(
                f"Recipe '{recipe.name}' has an expected yield but does not track variance"
            )

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    # --- Recipe conversions ---------------------------------------------------

    def initiate(
        self,
        recipe_id: int,
        input_product_id: int,
        location_id: int,
        input_quantity: Number,
        output_product_id: int | None = None,
        notes: str = "",
    ) -> ConversionRecord:
        """Deduct input stock and open a conversion awaiting its yield.

        Raises RecipeNotFound for an unknown recipe and ConversionRejected
        with every validation error otherwise.
        """
        recipe = self._require_recipe(recipe_id)
        result = self.validate(recipe_id, input_product_id, location_id, input_quantity)
        if not result.valid:
            raise ConversionRejected(result.errors)

        quantity = Quantity.positive(input_quantity).value
        expected = recipe.expected_output_for(quantity)

        record = ConversionRecord.start(
            recipe_id=recipe.id,
            input_product_id=input_product_id,
            location_id=location_id,
            input_quantity=quantity,
            expected_output=expected,
            output_product_id=output_product_id,
            notes=notes,
        )

        self._deduct(input_product_id, location_id, quantity)
        try:
            record.begin_yield_recording()
            self._conversions.save(record)
        except Exception:
            logger.error(
                "Could not record conversion for product %s at location %s; "
                "restoring %s deducted units",
                input_product_id, location_id, quantity,
            )
            self._credit(input_product_id, location_id, quantity)
            raise

        logger.info(
            "Conversion #%s started: %s of product %s at location %s, expecting %s",
            record.id, quantity, input_product_id, location_id, expected,
        )
        self._publisher.publish(
            ConversionInitiated(
                conversion_id=record.id,
                input_product_id=input_product_id,
                location_id=location_id,
                input_quantity=quantity,
                expected_output=expected,
            )
        )
        return record

    def complete(
        self,
        conversion_id: int,
        actual_output: Number,
        variance_reasons: list[str] | tuple[str, ...] = (),
        notes: str | None = None,
    ) -> ConversionRecord:
        """Record the measured yield, compute variance and credit the output.

        Held under the conversion's own lock from the re-read to the save,
        so a concurrent complete or cancel of the same conversion sees the
        result of this one.
        """
        actual = Quantity.of(actual_output).value
        reasons = list(variance_reasons)

        with self._locks.hold(("conversion", conversion_id)):
            # Work on a copy so a failed credit leaves the stored record untouched.
            record = copy.deepcopy(self._require_record(conversion_id))
            recipe = self._recipes.get(record.recipe_id) if record.recipe_id is not None else None

            record.record_yield(actual, reasons, notes=notes)
            record.flagged = recipe is not None and recipe.exceeds_acceptable_variance(
                record.variance_percentage
            )
            record.warnings.extend(self._unknown_reason_warnings(reasons))

            credited = record.output_product_id is not None
            if credited:
                self._credit(record.output_product_id, record.location_id, actual)
            try:
                self._conversions.save(record)
            except Exception:
                logger.error(
                    "Could not record completion of conversion #%s; "
                    "withdrawing %s credited units",
                    conversion_id, actual if credited else ZERO,
                )
                if credited:
                    self._deduct(record.output_product_id, record.location_id, actual)
                raise

        if record.flagged:
            logger.warning(
                "Conversion #%s variance %.2f%% exceeds acceptable range",
                record.id, record.variance_percentage,
            )
        logger.info("Conversion #%s completed with output %s", record.id, actual)
        self._publisher.publish(
            ConversionCompleted(
                conversion_id=record.id,
                actual_output=actual,
                variance_percentage=record.variance_percentage,
                flagged=record.flagged,
            )
        )
        return record

    def cancel(self, conversion_id: int, reason: str | None = None) -> None:
        """Cancel an open conversion and give the input stock back.

        Cancelling twice is a no-op. Cancelling a completed conversion
        raises InvalidStateTransition.
        """
        with self._locks.hold(("conversion", conversion_id)):
            record = copy.deepcopy(self._require_record(conversion_id))
            if not record.cancel(reason):
                return

            self._credit(record.input_product_id, record.location_id, record.input_quantity)
            try:
                self._conversions.save(record)
            except Exception:
                logger.error(
                    "Could not record cancellation of conversion #%s; "
                    "taking back %s restored units",
                    conversion_id, record.input_quantity,
                )
                self._deduct(record.input_product_id, record.location_id, record.input_quantity)
                raise

        logger.info("Conversion #%s cancelled (%s)", record.id, reason or "no reason given")
        self._publisher.publish(ConversionCancelled(conversion_id=record.id, reason=reason))

    # --- Direct conversions ---------------------------------------------------

    def convert_direct(
        self,
        input_product_id: int,
        output_product_id: int | None,
        location_id: int,
        input_quantity: Number,
        output_quantity: Number | None,
        notes: str = "",
    ) -> ConversionRecord:
        """Convert without a recipe, using a caller-supplied output quantity.

        No ratio is applied and no variance is computed; the record is
        completed immediately.
        """
        if output_product_id is None or output_quantity is None:
            raise ValidationError(
                "Direct conversions require an output product and an output quantity"
            )
        quantity = Quantity.positive(input_quantity).value
        produced = Quantity.positive(output_quantity).value

        record = ConversionRecord.direct(
            input_product_id=input_product_id,
            output_product_id=output_product_id,
            location_id=location_id,
            input_quantity=quantity,
            output_quantity=produced,
            notes=notes,
        )

        self._deduct(input_product_id, location_id, quantity)
        try:
            self._credit(output_product_id, location_id, produced)
        except DomainException:
            self._credit(input_product_id, location_id, quantity)
            raise
        self._conversions.save(record)

        logger.info(
            "Direct conversion #%s: %s of product %s -> %s of product %s at location %s",
            record.id, quantity, input_product_id, produced, output_product_id, location_id,
        )
        self._publisher.publish(
            ConversionCompleted(
                conversion_id=record.id,
                actual_output=produced,
                variance_percentage=None,
                flagged=False,
            )
        )
        return record

    # --- Queries --------------------------------------------------------------

    def get(self, conversion_id: int) -> ConversionRecord:
        return self._require_record(conversion_id)

    def history(self, product_id: int) -> list[ConversionRecord]:
        """Every conversion that used or produced *product_id*, newest first."""
        records = self._conversions.list_for_product(product_id)
        return sorted(records, key=lambda r: (r.created_at, r.id or 0), reverse=True)

    def stats(self, product_id: int) -> ConversionStats:
        return ConversionStats.from_history(self.history(product_id))

    def active_recipes(self) -> list[Recipe]:
        return self._recipes.list_active()

    def available_recipes(self, category_ids: list[int] | set[int]) -> list[Recipe]:
        """Active recipes that accept input from any of *category_ids*."""
        wanted = set(category_ids)
        seen: set[int] = set()
        matches: list[Recipe] = []
        for recipe in self._recipes.list_active():
            if recipe.id in seen or not any(recipe.accepts_category(c) for c in wanted):
                continue
            seen.add(recipe.id)
            matches.append(recipe)
        return matches

    # --- Internal helpers -----------------------------------------------------

    def _require_recipe(self, recipe_id: int) -> Recipe:
        recipe = self._recipes.get(recipe_id)
        if recipe is None:
            raise RecipeNotFound(f"Recipe #{recipe_id} not found")
        return recipe

    def _require_record(self, conversion_id: int) -> ConversionRecord:
        record = self._conversions.get_by_id(conversion_id)
        if record is None:
            raise RecordNotFound(f"Conversion #{conversion_id} not found")
        return record

    def _deduct(self, product_id: int, location_id: int, amount: Decimal) -> InventoryRecord:
        with self._locks.hold((product_id, location_id)):
            # Re-read inside the lock; validate() ran without it.
            record = self._inventory.get(product_id, location_id)
            if record is None:
                raise InsufficientStock(
                    f"No inventory record for product {product_id} at location {location_id}"
                )
            record.deduct(amount)
            return self._inventory.upsert(product_id, location_id, record.quantity)

    def _credit(self, product_id: int, location_id: int, amount: Decimal) -> InventoryRecord:
        with self._locks.hold((product_id, location_id)):
            record = self._inventory.get(product_id, location_id)
            if record is None:
                record = InventoryRecord(product_id=product_id, location_id=location_id)
            record.credit(amount)
            return self._inventory.upsert(product_id, location_id, record.quantity)

    def _unknown_reason_warnings(self, reasons: list[str]) -> list[str]:
        if not reasons or self._variance_reasons is None:
            return []
        known = {reason.code for reason in self._variance_reasons.list_active()}
        return [f"Unknown variance reason '{code}'" for code in reasons if code not in known]
