"""
formcanvas

Component-tree editing engine for a drag-and-drop form builder.

Usage:
    from formcanvas.services.drop_zone import classify_drop
    from formcanvas.services.smart_insert import apply_smart_drop
    from formcanvas.services.form_builder_service import FormBuilderService

Example:
    session = FormBuilderService()
    session.add_component("text_input")
    result = session.drop(
        NewItemPayload(component_type="email_input"),
        DropIntent(position="right", target_id=session.components[0].id),
    )
    print(result.selected_id)
"""

__version__ = "1.0.0"
