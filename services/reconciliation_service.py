"""Ingredient reconciliation - registers ingredient names referenced by products."""

from typing import Iterable, List
import logging

from app.exceptions import ReconciliationError
from domain.enums import Species
from domain.schemas.ingredient_schemas import Ingredient, PushManyByNames
from repositories.ingredient_repository import IngredientRepository

logger = logging.getLogger("healthybites.reconciliation")


class IngredientReconciler:
    """
    Makes sure every ingredient name a product references has at least a
    placeholder entry (rating and notes unset) for the product's species.

    The product write and the reconciliation are separate store operations;
    a failure here never undoes the product write. With ``strict`` set the
    failure is raised to the caller as ReconciliationError, otherwise it is
    logged and the product write is reported as successful.
    """

    def __init__(self, ingredient_repository: IngredientRepository, strict: bool = False):
        self.ingredient_repository = ingredient_repository
        self.strict = strict

    async def reconcile(self, names: Iterable[str], species: Species) -> List[Ingredient]:
        unique_names = list(dict.fromkeys(name for name in names if name))
        if not unique_names:
            return []

        species = Species(species)
        try:
            pushed = await self.ingredient_repository.push_many(
                PushManyByNames(names=unique_names, species=species)
            )
        except Exception as exc:
            if self.strict:
                raise ReconciliationError(
                    f"Ingredient reconciliation failed: {exc}",
                    details={"names": unique_names, "species": species.value},
                ) from exc
            logger.exception(
                "Ingredient reconciliation failed for %d names (%s)",
                len(unique_names),
                species.value,
            )
            return []

        logger.debug(
            "Reconciled %d ingredient names for %s", len(pushed), species.value
        )
        return pushed
