from pydantic import BaseModel, ConfigDict


class BaseReelcutModel(BaseModel):
    """Base Pydantic model for the reelcut project.

    Instances are frozen so timeline values can be shared between the live
    state and history snapshots without copying.
    """

    model_config = ConfigDict(
        frozen=True,
        revalidate_instances="never",
        validate_assignment=True,
        populate_by_name=True,
    )
