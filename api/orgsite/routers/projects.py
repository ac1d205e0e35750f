"""Project catalog routes consumed by the site's page generator.

- /projects -> every configured project, in declaration order
- /projects/{slug} -> one project page, with README-derived sections
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from orgsite.models.error import ErrorDetail
from orgsite.models.project import ProjectList, ProjectMetadata
from orgsite.services.catalog_service import ProjectCatalog

router = APIRouter()


def get_catalog(request: Request) -> ProjectCatalog:
    return request.app.state.catalog


@router.get("/projects", response_model=ProjectList)
async def list_projects(
    featured: bool = Query(False, description="Only projects flagged as featured."),
    catalog: ProjectCatalog = Depends(get_catalog),
) -> ProjectList:
    if featured:
        projects = await catalog.get_featured_projects()
    else:
        projects = await catalog.get_all_projects()
    return ProjectList(projects=projects, total=len(projects))


@router.get(
    "/projects/{slug}",
    response_model=ProjectMetadata,
    responses={404: {"model": ErrorDetail}},
)
async def get_project(slug: str, catalog: ProjectCatalog = Depends(get_catalog)) -> ProjectMetadata:
    project = await catalog.get_project_detail(slug)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project
