"""
Member profile endpoints.

The ``/me`` routes edit the caller's own profile; writes drop the caller's
cached match scores. ``/{username}`` serves the public profile and records a
profile view.
"""

from fastapi import APIRouter, Query, Response, status

from neurmatic.core.models.io.profiles import (
    ExperienceCreate,
    ExperienceRead,
    ModelsRead,
    ModelsUpdate,
    PreferencesRead,
    PreferencesUpdate,
    ProfileRead,
    ProfileUpdate,
    ProfileViewStats,
    PublicProfileRead,
    SkillCreate,
    SkillRead,
)
from neurmatic.server.services.deps import CurrentUserDep, OptionalUserDep, ProfileServiceDep

router = APIRouter(tags=["profiles"])


@router.put(
    "/me",
    response_model=ProfileRead,
    summary="Update My Profile",
    description="Create or update the caller's profile. Only the fields sent are changed.",
    response_description="The updated profile.",
)
async def update_my_profile(data: ProfileUpdate, user: CurrentUserDep, service: ProfileServiceDep) -> ProfileRead:
    """
    Upsert the caller's profile.

    - **display_name**, **headline**, **bio**, **location**, **website**: Free text.
    - **availability_status**: `actively_looking`, `open_to_offers` or `not_looking`.
    - **years_experience**: Total years of professional experience.
    """
    return await service.update_profile(user, data)


@router.post(
    "/me/skills",
    response_model=SkillRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Skill",
    description="Add a skill with a 1..5 proficiency to the caller's profile.",
    response_description="The created skill.",
    responses={409: {"description": "Skill with the same name already on the profile"}},
)
async def add_skill(data: SkillCreate, user: CurrentUserDep, service: ProfileServiceDep) -> SkillRead:
    return await service.add_skill(user, data)


@router.delete(
    "/me/skills/{skill_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Skill",
    responses={404: {"description": "Skill not found on the caller's profile"}},
)
async def remove_skill(skill_id: str, user: CurrentUserDep, service: ProfileServiceDep) -> Response:
    await service.remove_skill(user, skill_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/me/experiences",
    response_model=ExperienceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Work Experience",
    description="Add a work experience entry. Its tech stack feeds the match score.",
    response_description="The created work experience.",
)
async def add_experience(data: ExperienceCreate, user: CurrentUserDep, service: ProfileServiceDep) -> ExperienceRead:
    """
    Add a work experience.

    - **tech_stack.frameworks**: Frameworks used in the role.
    - **tech_stack.languages**: Programming languages used in the role.
    """
    return await service.add_experience(user, data)


@router.delete(
    "/me/experiences/{experience_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Work Experience",
    responses={404: {"description": "Work experience not found on the caller's profile"}},
)
async def remove_experience(experience_id: str, user: CurrentUserDep, service: ProfileServiceDep) -> Response:
    await service.remove_experience(user, experience_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/me/models",
    response_model=ModelsRead,
    summary="Replace My LLM Models",
    description="Replace the list of LLMs the caller works with.",
    response_description="The stored model list.",
)
async def replace_models(data: ModelsUpdate, user: CurrentUserDep, service: ProfileServiceDep) -> ModelsRead:
    return await service.replace_models(user, data.models)


@router.get(
    "/me/preferences",
    response_model=PreferencesRead,
    summary="Get My Job Preferences",
    responses={404: {"description": "Preferences not set yet"}},
)
async def get_preferences(user: CurrentUserDep, service: ProfileServiceDep) -> PreferencesRead:
    return await service.get_preferences(user)


@router.put(
    "/me/preferences",
    response_model=PreferencesRead,
    summary="Update My Job Preferences",
    description="Set work location, relocation and salary preferences used by job matching.",
    response_description="The stored preferences.",
    responses={422: {"description": "salary_expectation_min is greater than salary_expectation_max"}},
)
async def update_preferences(
    data: PreferencesUpdate, user: CurrentUserDep, service: ProfileServiceDep
) -> PreferencesRead:
    return await service.update_preferences(user, data)


@router.get(
    "/me/views",
    response_model=ProfileViewStats,
    summary="Profile View Statistics",
    description="Views of the caller's profile over the last `days` days.",
    response_description="View counts and recent viewers.",
)
async def view_stats(
    user: CurrentUserDep,
    service: ProfileServiceDep,
    days: int = Query(30, ge=1, le=365),
) -> ProfileViewStats:
    return await service.view_stats(user, days)


@router.get(
    "/{username}",
    response_model=PublicProfileRead,
    summary="Get Public Profile",
    description="Public profile with skills, work experience and models. Records a view unless the owner looks.",
    response_description="The public profile.",
    responses={404: {"description": "Unknown or inactive user"}},
)
async def get_public_profile(username: str, viewer: OptionalUserDep, service: ProfileServiceDep) -> PublicProfileRead:
    return await service.get_public_profile(username, viewer)
