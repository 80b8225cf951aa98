"""kubedeck - split-view Kubernetes dashboard.

Connection targets come from kubeconfig contexts and are opened as tabs in
one or more side-by-side panels. The panel/tab arrangement is managed by
:mod:`kubedeck.workspace` as a pure state machine; the Streamlit pages only
render it and feed user gestures back in.
"""

__version__ = "0.1.0"
