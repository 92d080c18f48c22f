# programs/api/urls.py

from django.urls import path
from . import views

app_name = "programs"

urlpatterns = [
    # Programs
    path("mine/", views.MyProgramsView.as_view(), name="my-programs"),
    path("public/<str:slug>/", views.PublicProgramView.as_view(), name="public-program"),
    path("<uuid:program_id>/", views.ProgramDetailView.as_view(), name="program-detail"),

    # Curriculum plan
    path("<uuid:program_id>/plan/", views.ProgramPlanView.as_view(), name="program-plan"),
    path("<uuid:program_id>/blueprints/", views.BlueprintListView.as_view(), name="blueprints"),
    path("<uuid:program_id>/blueprints/<uuid:blueprint_id>/", views.BlueprintDetailView.as_view(), name="blueprint-detail"),
    path("<uuid:program_id>/phases/", views.PhaseView.as_view(), name="phases"),
    path("<uuid:program_id>/phases/<int:phase_number>/", views.PhaseDetailView.as_view(), name="phase-detail"),
    path("<uuid:program_id>/phases/<int:phase_number>/days/", views.PhaseDayView.as_view(), name="phase-days"),

    # Sections
    path(
        "<uuid:program_id>/blueprints/<uuid:blueprint_id>/sections/",
        views.BlueprintSectionsView.as_view(),
        name="blueprint-sections",
    ),
    path(
        "<uuid:program_id>/blueprints/<uuid:blueprint_id>/sections/reorder/",
        views.SectionReorderView.as_view(),
        name="section-reorder",
    ),
    path(
        "<uuid:program_id>/blueprints/<uuid:blueprint_id>/sections/<uuid:item_id>/",
        views.BlueprintSectionItemView.as_view(),
        name="blueprint-section-item",
    ),
    path("sections/<uuid:section_id>/", views.SectionDetailView.as_view(), name="section-detail"),

    # Routine blocks on a day
    path(
        "<uuid:program_id>/blueprints/<uuid:blueprint_id>/routine-blocks/",
        views.BlueprintRoutineBlocksView.as_view(),
        name="blueprint-routine-blocks",
    ),
    path(
        "<uuid:program_id>/blueprints/<uuid:blueprint_id>/routine-blocks/<uuid:link_id>/",
        views.BlueprintRoutineBlockDetailView.as_view(),
        name="blueprint-routine-block-detail",
    ),

    # Workout library
    path("library/", views.WorkoutLibraryListView.as_view(), name="library"),
    path("library/filters/", views.WorkoutLibraryFiltersView.as_view(), name="library-filters"),
    path("library/custom/", views.WorkoutLibraryCustomView.as_view(), name="library-custom"),
    path("library/<uuid:library_id>/", views.WorkoutLibraryDetailView.as_view(), name="library-detail"),

    # Routine blocks
    path("routine-blocks/", views.RoutineBlockListView.as_view(), name="routine-blocks"),
    path("routine-blocks/items/<uuid:item_id>/", views.RoutineItemDetailView.as_view(), name="routine-item-detail"),
    path("routine-blocks/<uuid:block_id>/", views.RoutineBlockDetailView.as_view(), name="routine-block-detail"),
    path("routine-blocks/<uuid:block_id>/items/", views.RoutineItemListView.as_view(), name="routine-items"),
    path(
        "routine-blocks/<uuid:block_id>/items/reorder/",
        views.RoutineItemReorderView.as_view(),
        name="routine-item-reorder",
    ),
]
