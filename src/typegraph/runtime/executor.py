"""
Graph executor - resolves a call tree against a spec registry.

Handles:
- Walking the call tree recursively, one type chunk per level
- ::compose fan-out and ::when conditional inclusion
- Argument and result validation at every node
- Concurrent resolution of siblings and array elements
- Per-field capture of resolver failures
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Iterable, Optional, Union

from ..core.conditions import conditions_pass
from ..core.errors import CallShapeError, RequestTimeoutError, ResolverError, StructuralError
from ..core.query_types import COMPOSE, WHEN, CallNode, ResultEnvelope
from ..core.registry import SpecRegistry, TypeChunk
from ..core.request_parser import RequestParser
from ..core.validator import (
    validate_args,
    validate_custom_result,
    validate_custom_type,
    validate_native_result,
)
from .context import NodePath, RequestContext, ResolveInfo

logger = logging.getLogger(__name__)

# Tag used in the envelope for request-level failures
PROCESSING_ERROR = "processingError"


class GraphExecutor:
    """
    Executes call trees against a SpecRegistry.

    Usage:
        executor = GraphExecutor(registry)
        envelope = await executor.execute(["viewer", "id"])
        envelope.to_dict()  # {"data": {"viewer": {"id": "123"}}}
    """

    def __init__(self, registry: SpecRegistry, *, timeout: Optional[float] = None):
        """
        Initialize executor.

        Args:
            registry: Spec registry to resolve against
            timeout: Default per-request timeout in seconds (None = no limit)
        """
        self.registry = registry
        self.timeout = timeout
        self.parser = RequestParser()

    async def execute(
        self,
        graph: Union[CallNode, list, tuple],
        request: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> ResultEnvelope:
        """
        Resolve a whole call tree.

        Args:
            graph: Parsed CallNode or a decoded JSON call tree
            request: Inbound transport request, exposed as context.request
            timeout: Overrides the executor's default timeout

        Returns:
            ResultEnvelope with data (and errors for failed fields), or with
            a single processingError when the request was aborted
        """
        context = RequestContext(request=request)
        limit = timeout if timeout is not None else self.timeout

        try:
            node = graph if isinstance(graph, CallNode) else self.parser.parse(graph)
            result = await self._run(node, context, limit)
        except StructuralError as e:
            logger.info(f"Request aborted: {e.message}")
            return ResultEnvelope.failure(PROCESSING_ERROR, e.message)
        except Exception as e:
            logger.exception("Unexpected error while resolving graph")
            return ResultEnvelope.failure(PROCESSING_ERROR, str(e) or e.__class__.__name__)

        if context.has_errors:
            logger.debug(f"Request resolved with {len(context.errors)} field error(s)")
        return ResultEnvelope.success(result, context.errors)

    async def _run(self, node: CallNode, context: RequestContext, limit: Optional[float]) -> Any:
        resolution = self.resolve(node, self.registry.root, None, context, ())
        if limit is None:
            return await resolution
        try:
            return await asyncio.wait_for(resolution, limit)
        except asyncio.TimeoutError:
            raise RequestTimeoutError(limit) from None

    async def resolve(
        self,
        node: CallNode,
        chunk: TypeChunk,
        parent_data: Any,
        context: RequestContext,
        path: NodePath = (),
    ) -> Union[dict[str, Any], list[Any]]:
        """
        Resolve one call node.

        Args:
            node: The call to resolve
            chunk: Type chunk the call's name is looked up in
            parent_data: Value produced by the parent field's resolver
            context: Request context shared by the whole request
            path: Position of the node, used to order the error log

        Returns:
            {name: value} for ordinary calls, a positional list for ::compose

        Raises:
            StructuralError: If the request must be aborted
        """
        if node.is_compose:
            return await self._resolve_compose(node, chunk, parent_data, context, path)
        if node.is_when:
            raise CallShapeError(f"{WHEN} blocks are only allowed among the children of a custom type field.")

        field = chunk.get(node.name)
        if field is None:
            raise CallShapeError(f'The query name "{node.name}" is not allowed.')
        logger.debug(f"Resolving {node.name} at {path}")

        validate_args(node.name, node.args, field.expect)

        descriptor = field.type
        if not descriptor.is_native:
            validate_custom_type(node.name, descriptor, self.registry)

        info = ResolveInfo(args=dict(node.args or {}), context=context, data=parent_data)
        try:
            data = await self._call_resolver(field.resolve, info)
        except Exception as e:
            error = ResolverError(node.name, e)
            logger.warning(f'Resolver for "{node.name}" failed: {error}', exc_info=True)
            context.record_error(path, error)
            return {node.name: None}

        children_requested = bool(node.children)

        if descriptor.is_native:
            validate_native_result(node.name, data, descriptor, children_requested)
            return {node.name: data}

        validate_custom_result(node.name, data, descriptor, children_requested)
        if data is None:
            return {node.name: None}

        type_chunk = self.registry.get_type(descriptor.name)

        if descriptor.is_array:
            items = await asyncio.gather(*(
                self._resolve_item(node.children, type_chunk, item, context, path + (index,))
                for index, item in enumerate(data)
            ))
            return {node.name: list(items)}

        out = await self._resolve_children(node.children, type_chunk, data, context, path)
        return {node.name: out}

    async def _resolve_compose(
        self,
        node: CallNode,
        chunk: TypeChunk,
        parent_data: Any,
        context: RequestContext,
        path: NodePath,
    ) -> list[Any]:
        # gather keeps positional order regardless of completion order
        results = await asyncio.gather(*(
            self.resolve(child, chunk, parent_data, context, path + (index,))
            for index, child in enumerate(node.children)
        ))
        return list(results)

    async def _resolve_item(
        self,
        children: list[CallNode],
        chunk: TypeChunk,
        item: Any,
        context: RequestContext,
        path: NodePath,
    ) -> Optional[dict[str, Any]]:
        if item is None:
            return None
        return await self._resolve_children(children, chunk, item, context, path)

    async def _resolve_children(
        self,
        children: list[CallNode],
        chunk: TypeChunk,
        data: Any,
        context: RequestContext,
        path: NodePath,
    ) -> dict[str, Any]:
        """
        Resolve the children of one custom-typed value into a single out map.

        Real children run first; each ::when block is then checked against
        their merged output and the admitted calls run as a second batch.
        """
        out: dict[str, Any] = {}

        real_children = [
            (path + (index,), child)
            for index, child in enumerate(children)
            if not child.is_when
        ]
        await self._merge_into(out, real_children, chunk, data, context)

        admitted: list[tuple[NodePath, CallNode]] = []
        for index, block in enumerate(children):
            if not block.is_when:
                continue
            if conditions_pass(block.args, out):
                admitted.extend(
                    (path + (index, position), child)
                    for position, child in enumerate(block.children)
                )
        if admitted:
            await self._merge_into(out, admitted, chunk, data, context)

        return out

    async def _merge_into(
        self,
        out: dict[str, Any],
        calls: Iterable[tuple[NodePath, CallNode]],
        chunk: TypeChunk,
        data: Any,
        context: RequestContext,
    ) -> None:
        calls = list(calls)
        for _, child in calls:
            if child.is_compose:
                raise CallShapeError(f"{COMPOSE} is not allowed among the children of a field.")

        results = await asyncio.gather(*(
            self.resolve(child, chunk, data, context, child_path)
            for child_path, child in calls
        ))
        # Merge in request order so key order does not depend on timing
        for result in results:
            out.update(result)

    async def _call_resolver(self, resolve: Any, info: ResolveInfo) -> Any:
        result = resolve(info)
        if inspect.isawaitable(result):
            result = await result
        return result


async def handle_graph(
    graph: Union[CallNode, list, tuple],
    registry: SpecRegistry,
    request: Any = None,
    *,
    timeout: Optional[float] = None,
) -> dict[str, Any]:
    """
    Convenience function to resolve a call tree.

    Args:
        graph: Parsed CallNode or a decoded JSON call tree
        registry: Spec registry to resolve against
        request: Inbound transport request, exposed as context.request
        timeout: Optional timeout in seconds

    Returns:
        Result envelope as a plain dict
    """
    executor = GraphExecutor(registry, timeout=timeout)
    envelope = await executor.execute(graph, request)
    return envelope.to_dict()
