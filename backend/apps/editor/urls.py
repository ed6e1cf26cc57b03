from django.urls import path

from .views import EditorView

urlpatterns = [
    path('<int:page_id>/editor/', EditorView.as_view(), name='page-editor'),
    path('<int:page_id>/editor/operations/', EditorView.as_view(), {'action': 'operations'}, name='page-editor-operations'),
    path('<int:page_id>/editor/undo/', EditorView.as_view(), {'action': 'undo'}, name='page-editor-undo'),
    path('<int:page_id>/editor/redo/', EditorView.as_view(), {'action': 'redo'}, name='page-editor-redo'),
    path('<int:page_id>/editor/save/', EditorView.as_view(), {'action': 'save'}, name='page-editor-save'),
]
