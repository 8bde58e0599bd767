"""
Gesture Gateway

FastAPI service that lets a canvas view layer drive the graph editor.
Each request is one gesture; mutating gestures respond with the new status.

HTTP Endpoints:
- GET   /                    - Health check
- GET   /health              - Detailed health status
- GET   /status              - Current DAG status and diagnostics
- GET   /graph               - Snapshot of nodes and edges
- POST  /nodes               - Create a node from a label
- POST  /edges               - Connect two nodes
- PATCH /nodes/{node_id}     - Change selection or position of a node
- PATCH /edges/{edge_id}     - Change selection of an edge
- POST  /selection/delete    - Delete all selected nodes and edges
- POST  /keys                - Forward a key press
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, Response
from pydantic import BaseModel
import uvicorn

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from engine.config.loader import ConfigLoader, EditorConfig
from engine.graph.errors import UnknownEntity
from engine.runtime.controller import InteractionController

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Request models (Pydantic)
class CreateNodeRequest(BaseModel):
    """Label entered in the "add node" prompt"""
    label: Optional[str] = None


class ConnectRequest(BaseModel):
    """Candidate edge from a drag-to-connect gesture"""
    source: str
    target: str


class PositionModel(BaseModel):
    x: float
    y: float


class NodeChangeRequest(BaseModel):
    """Transient node changes reported by the view layer"""
    selected: Optional[bool] = None
    position: Optional[PositionModel] = None


class EdgeChangeRequest(BaseModel):
    """Transient edge changes reported by the view layer"""
    selected: Optional[bool] = None


class KeyRequest(BaseModel):
    key: str


# Response models (Pydantic)
class StatusResponse(BaseModel):
    """DAG status with diagnostics"""
    status: str
    message: str
    cycle: list[str]
    isolated: list[str]


class NodeResponse(BaseModel):
    id: str
    label: str
    position: PositionModel
    selected: bool


class EdgeResponse(BaseModel):
    id: str
    source: str
    target: str
    marker_end: str
    selected: bool


class GraphResponse(BaseModel):
    nodes: list[NodeResponse]
    edges: list[EdgeResponse]


class NodeCreatedResponse(BaseModel):
    node: NodeResponse
    status: StatusResponse


class EdgeCreatedResponse(BaseModel):
    edge: EdgeResponse
    status: StatusResponse


class DeleteResponse(BaseModel):
    removed_nodes: list[str]
    removed_edges: list[str]
    status: StatusResponse


class KeyResponse(BaseModel):
    deleted: bool
    status: StatusResponse


def _controller(request: Request) -> InteractionController:
    return request.app.state.controller


def _status(controller: InteractionController) -> StatusResponse:
    return StatusResponse(**controller.report.to_dict())


def create_app(config: Optional[EditorConfig] = None) -> FastAPI:
    """
    Build the gateway application.

    Args:
        config: Editor configuration; loaded from EDITOR_CONFIG when omitted

    Returns:
        FastAPI app owning a single InteractionController
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler owning the editor controller"""
        logger.info("Starting Gesture Gateway...")

        editor_config = config or ConfigLoader.from_env().load()
        logging.getLogger().setLevel(editor_config.log_level.upper())

        app.state.controller = InteractionController(editor_config)
        app.state.started_at = datetime.now()

        yield

        logger.info("Gesture Gateway shutdown complete")

    # Endpoints are async so every gesture runs on the event loop thread and
    # mutations never interleave with validation.
    app = FastAPI(
        title="DAG Canvas - Gesture Gateway",
        description="Build a directed graph and track whether it is a valid DAG",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {
            "status": "running",
            "service": "gesture-gateway",
            "timestamp": datetime.now().isoformat(),
        }

    @app.get("/health")
    async def health(request: Request):
        """Detailed health status"""
        controller = _controller(request)
        return {
            "status": "healthy",
            "service": "gesture-gateway",
            "nodes": len(controller.store.nodes),
            "edges": len(controller.store.edges),
            "started_at": request.app.state.started_at.isoformat(),
            "timestamp": datetime.now().isoformat(),
        }

    @app.get("/status")
    async def get_status(request: Request) -> StatusResponse:
        """Current DAG status"""
        return _status(_controller(request))

    @app.get("/graph")
    async def get_graph(request: Request) -> GraphResponse:
        """Snapshot of the full graph"""
        return GraphResponse(**_controller(request).export().to_dict())

    @app.post("/nodes", status_code=201)
    async def create_node(body: CreateNodeRequest, request: Request) -> NodeCreatedResponse:
        """
        Create a node.

        Raises:
            400: Empty or missing label
        """
        controller = _controller(request)
        node = controller.create_node(body.label)

        if node is None:
            raise HTTPException(status_code=400, detail="Node label must be non-empty")

        return NodeCreatedResponse(
            node=NodeResponse(**node.to_dict()),
            status=_status(controller),
        )

    @app.post("/edges", status_code=201)
    async def connect(
        body: ConnectRequest, request: Request, response: Response
    ) -> EdgeCreatedResponse:
        """
        Connect two nodes.

        Responds 201 when an edge is created, 200 when the pair is already
        connected (the existing edge is returned and the graph is unchanged).

        Raises:
            409: Self-loop or unknown endpoint
        """
        controller = _controller(request)
        existing = controller.store.find_edge(body.source, body.target)
        edge = controller.connect(body.source, body.target)

        if edge is None:
            rejection = controller.last_rejection
            raise HTTPException(
                status_code=409,
                detail={
                    "reason": rejection.reason if rejection else "rejected",
                    "source": body.source,
                    "target": body.target,
                },
            )

        if existing is not None:
            response.status_code = 200

        return EdgeCreatedResponse(
            edge=EdgeResponse(**edge.to_dict()),
            status=_status(controller),
        )

    @app.patch("/nodes/{node_id}")
    async def change_node(
        node_id: str, body: NodeChangeRequest, request: Request
    ) -> NodeResponse:
        """
        Apply a selection or position change to a node.

        Raises:
            404: Unknown node
        """
        controller = _controller(request)
        try:
            node = controller.store.get_node(node_id)
            if body.selected is not None:
                node = controller.select_node(node_id, body.selected)
            if body.position is not None:
                node = controller.move_node(node_id, body.position.x, body.position.y)
        except UnknownEntity as e:
            raise HTTPException(status_code=404, detail=str(e))

        return NodeResponse(**node.to_dict())

    @app.patch("/edges/{edge_id}")
    async def change_edge(
        edge_id: str, body: EdgeChangeRequest, request: Request
    ) -> EdgeResponse:
        """
        Apply a selection change to an edge.

        Raises:
            404: Unknown edge
        """
        controller = _controller(request)
        try:
            edge = controller.store.get_edge(edge_id)
            if body.selected is not None:
                edge = controller.select_edge(edge_id, body.selected)
        except UnknownEntity as e:
            raise HTTPException(status_code=404, detail=str(e))

        return EdgeResponse(**edge.to_dict())

    @app.post("/selection/delete")
    async def delete_selected(request: Request) -> DeleteResponse:
        """Delete every selected node and edge"""
        controller = _controller(request)
        nodes, edges = controller.delete_selected()

        return DeleteResponse(
            removed_nodes=[n.id for n in nodes],
            removed_edges=[e.id for e in edges],
            status=_status(controller),
        )

    @app.post("/keys")
    async def key_press(body: KeyRequest, request: Request) -> KeyResponse:
        """Forward a key press; delete keys remove the current selection"""
        controller = _controller(request)
        deleted = controller.handle_key(body.key)
        return KeyResponse(deleted=deleted, status=_status(controller))

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8002"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting Gesture Gateway on {host}:{port}")
    logger.info(f"Config: {os.getenv('EDITOR_CONFIG', 'config/editor.yaml')}")

    uvicorn.run(app, host=host, port=port)
