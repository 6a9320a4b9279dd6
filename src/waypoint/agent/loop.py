"""Orchestration loop for iterative, approval-aware tool use."""

import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from waypoint.agent.models import (
    AgentConfig,
    AgentEvent,
    AgentMode,
    Completed,
    EventType,
    Failed,
    RunOutcome,
    Suspended,
    SuspendedRun,
)
from waypoint.agent.prompts import get_system_prompt
from waypoint.approvals.gate import ApprovalGate
from waypoint.approvals.models import PendingCommand, Resolution
from waypoint.errors import ResumeMismatchError, RunInProgressError
from waypoint.providers.client import CompletionOptions, ModelClient
from waypoint.providers.cost import SessionAccumulator
from waypoint.providers.models import Message, MessageRole, TokenUsage
from waypoint.tools.dispatcher import ToolDispatcher
from waypoint.tools.models import ToolDefinition
from waypoint.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from waypoint.approvals.executor import CommandExecutor
    from waypoint.config.schema import Config

logger = logging.getLogger(__name__)


class Orchestrator:
    """Drives orchestration runs.

    One run:
    1. Call the model with the mode's system prompt, the conversation and tools
    2. No tool calls: the reply is the final answer
    3. Otherwise dispatch the calls one by one, in order
    4. A call awaiting approval suspends the run; the caller holds the
       resulting SuspendedRun and resumes it once the command is resolved
    5. Otherwise append the results and repeat, up to max_iterations batches

    The orchestrator keeps no per-run state between calls; everything needed
    to resume travels in the SuspendedRun.
    """

    def __init__(
        self,
        model_client: ModelClient,
        registry: ToolRegistry,
        gate: Optional[ApprovalGate] = None,
        accumulator: Optional[SessionAccumulator] = None,
        config: Optional[AgentConfig] = None,
        event_callback: Optional[Callable[[AgentEvent], None]] = None,
    ):
        """Initialize the orchestrator.

        Args:
            model_client: Client used for completions
            registry: Tools available to the model
            gate: Approval gate for approval-gated tools
            accumulator: Session usage and cost tracker
            config: Run settings
            event_callback: Optional callback receiving lifecycle events
        """
        self.model_client = model_client
        self.registry = registry
        self.gate = gate or ApprovalGate()
        self.accumulator = accumulator or SessionAccumulator()
        self.config = config or AgentConfig()
        self.event_callback = event_callback
        self.dispatcher = ToolDispatcher(registry, self.gate, self.config.max_result_chars)
        self._active: set[str] = set()

    @classmethod
    def from_config(
        cls,
        config: "Config",
        model_client: Optional[ModelClient] = None,
        executor: Optional["CommandExecutor"] = None,
        event_callback: Optional[Callable[[AgentEvent], None]] = None,
    ) -> "Orchestrator":
        """Wire an orchestrator with built-in tools from configuration."""
        from waypoint.providers.client import LiteLLMClient
        from waypoint.providers.cost import LiteLLMPriceTable, StaticPriceTable
        from waypoint.tools.builtin import register_builtin_tools

        registry = ToolRegistry()
        register_builtin_tools(registry, config.tools)

        gate = ApprovalGate(
            executor=executor,
            poll_interval=config.approvals.poll_interval,
            max_polls=config.approvals.max_polls,
        )

        price_table = StaticPriceTable.from_config(config.pricing)
        if config.pricing.use_litellm_prices:
            price_table = LiteLLMPriceTable(fallback=price_table)

        return cls(
            model_client=model_client or LiteLLMClient.from_config(config.providers),
            registry=registry,
            gate=gate,
            accumulator=SessionAccumulator(price_table),
            config=AgentConfig.from_config(config),
            event_callback=event_callback,
        )

    def _emit_event(self, event_type: EventType, iteration: int, **kwargs) -> None:
        """Emit an event if callback is configured."""
        if self.event_callback:
            try:
                self.event_callback(
                    AgentEvent(
                        event_type=event_type,
                        iteration=iteration,
                        timestamp=datetime.now().isoformat(),
                        **kwargs,
                    )
                )
            except Exception as e:
                logger.warning(f"Event callback error: {e}")

    async def start_run(
        self,
        conversation: Sequence[Message],
        goal: str,
        mode: AgentMode | str = AgentMode.AGENT,
        model: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> RunOutcome:
        """Start a run for a new user goal.

        Args:
            conversation: Prior turns (never modified)
            goal: The new user message
            mode: Orchestration mode
            model: Model override
            conversation_id: Identifies the conversation for exclusivity

        Returns:
            Completed, Suspended or Failed

        Raises:
            RunInProgressError: If the conversation already has an active run
        """
        mode = AgentMode(mode)
        conversation_id = conversation_id or uuid.uuid4().hex
        self._acquire(conversation_id)
        try:
            logger.info(f"Starting run in {mode.value} mode for conversation {conversation_id}")
            self._emit_event(EventType.RUN_START, 0, message=goal, data={"mode": mode.value})

            transcript = [*conversation, Message.user(goal)]
            definitions = tuple(self.registry.list_definitions(mode))
            return await self._run(
                conversation_id, transcript, definitions, mode, model, iterations=0
            )
        finally:
            self._release(conversation_id)

    async def resume_run(self, resume_token: SuspendedRun, resolution: Resolution) -> RunOutcome:
        """Continue a suspended run with the resolution of its pending command.

        Args:
            resume_token: Token returned in the Suspended outcome
            resolution: Result of approving or rejecting the pending command

        Returns:
            Completed, Suspended or Failed

        Raises:
            ResumeMismatchError: If the resolution answers a different tool call
            RunInProgressError: If the conversation already has an active run
        """
        if resolution.tool_call_id != resume_token.pending_tool_call_id:
            raise ResumeMismatchError(resume_token.pending_tool_call_id, resolution.tool_call_id)
        if resolution.command_id != resume_token.pending_command_id:
            raise ResumeMismatchError(resume_token.pending_command_id, resolution.command_id)

        conversation_id = resume_token.conversation_id
        self._acquire(conversation_id)
        try:
            logger.info(
                f"Resuming run for conversation {conversation_id} "
                f"at iteration {resume_token.iterations}"
            )
            self._emit_event(
                EventType.RUN_RESUMED,
                resume_token.iterations,
                tool_call_id=resolution.tool_call_id,
                data={"status": resolution.status.value},
            )

            transcript = [*resume_token.conversation_snapshot, resolution.message]
            return await self._run(
                conversation_id,
                transcript,
                resume_token.tool_definitions_snapshot,
                resume_token.mode,
                resume_token.model,
                iterations=resume_token.iterations,
            )
        finally:
            self._release(conversation_id)

    def _acquire(self, conversation_id: str) -> None:
        if conversation_id in self._active:
            raise RunInProgressError(conversation_id)
        self._active.add(conversation_id)

    def _release(self, conversation_id: str) -> None:
        self._active.discard(conversation_id)

    async def _run(
        self,
        conversation_id: str,
        transcript: list[Message],
        definitions: tuple[ToolDefinition, ...],
        mode: AgentMode,
        model: Optional[str],
        iterations: int,
    ) -> RunOutcome:
        """Advance a run until it completes, suspends or fails."""
        system = Message.system(get_system_prompt(mode))
        options = CompletionOptions(
            model=model,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        run_usage = TokenUsage()

        while True:
            logger.info(f"Iteration {iterations + 1}/{self.config.max_iterations}")
            self._emit_event(EventType.ITERATION_START, iterations)

            messages = transcript
            if not transcript or transcript[0].role != MessageRole.SYSTEM.value:
                messages = [system, *transcript]

            try:
                reply = await self.model_client.complete(messages, definitions, options)
            except Exception as e:
                reason = f"Model call failed: {e}"
                logger.error(reason, exc_info=True)
                return self._fail(reason, transcript, run_usage, iterations)

            if reply.usage is not None:
                run_usage = run_usage + reply.usage
                self.accumulator.record(reply.usage, reply.model or model or "unknown")

            self._emit_event(EventType.AI_RESPONSE, iterations, message=reply.content or None)

            if not reply.has_tool_calls:
                answer = Message.assistant(reply.content)
                transcript.append(answer)
                logger.info(f"Run completed after {iterations} tool iterations")
                self._emit_event(EventType.RUN_COMPLETE, iterations, message=reply.content)
                return Completed(
                    message=answer,
                    conversation=tuple(transcript),
                    usage=run_usage,
                    iterations=iterations,
                )

            transcript.append(Message.assistant(reply.content, reply.tool_calls))
            logger.info(f"Model requested {len(reply.tool_calls)} tool calls")

            for index, call in enumerate(reply.tool_calls):
                self._emit_event(
                    EventType.TOOL_START,
                    iterations,
                    tool_name=call.tool_name,
                    tool_call_id=call.id,
                )
                result = await self.dispatcher.dispatch(call, definitions)

                if result.requires_approval and result.pending_command_id:
                    dropped = len(reply.tool_calls) - index - 1
                    if dropped:
                        logger.warning(
                            f"Dropping {dropped} tool calls queued after approval-gated call {call.id}"
                        )
                    return self._suspend(
                        conversation_id,
                        transcript,
                        definitions,
                        mode,
                        model,
                        iterations,
                        call.id,
                        result.pending_command_id,
                        run_usage,
                    )

                self._emit_event(
                    EventType.TOOL_COMPLETE if result.success else EventType.TOOL_ERROR,
                    iterations,
                    tool_name=call.tool_name,
                    tool_call_id=call.id,
                    message=result.text_result,
                )
                transcript.append(Message.tool(call.id, result.text_result))

            iterations += 1
            if iterations >= self.config.max_iterations:
                reason = f"Tool loop limit reached ({self.config.max_iterations} iterations)"
                logger.warning(reason)
                return self._fail(reason, transcript, run_usage, iterations)

    def _suspend(
        self,
        conversation_id: str,
        transcript: list[Message],
        definitions: tuple[ToolDefinition, ...],
        mode: AgentMode,
        model: Optional[str],
        iterations: int,
        tool_call_id: str,
        command_id: str,
        usage: TokenUsage,
    ) -> Suspended:
        token = SuspendedRun(
            conversation_id=conversation_id,
            conversation_snapshot=tuple(transcript),
            pending_tool_call_id=tool_call_id,
            pending_command_id=command_id,
            tool_definitions_snapshot=definitions,
            mode=mode,
            model=model,
            iterations=iterations,
        )
        logger.info(f"Run suspended awaiting approval of command {command_id}")
        self._emit_event(
            EventType.TOOL_APPROVAL_NEEDED,
            iterations,
            tool_call_id=tool_call_id,
            data={"pending_command_id": command_id},
        )
        self._emit_event(EventType.RUN_SUSPENDED, iterations, tool_call_id=tool_call_id)
        return Suspended(resume_token=token, pending_command_id=command_id, usage=usage)

    def _fail(
        self, reason: str, transcript: list[Message], usage: TokenUsage, iterations: int
    ) -> Failed:
        self._emit_event(EventType.RUN_FAILED, iterations, message=reason)
        return Failed(
            reason=reason,
            conversation=tuple(transcript),
            usage=usage,
            iterations=iterations,
        )

    async def approve(self, command_id: str) -> Optional[Resolution]:
        """Approve and run a pending command. See ApprovalGate.approve."""
        return await self.gate.approve(command_id)

    def reject(self, command_id: str) -> Optional[Resolution]:
        """Reject a pending command. See ApprovalGate.reject."""
        return self.gate.reject(command_id)

    def list_pending_commands(self) -> list[PendingCommand]:
        """Commands waiting for a decision, oldest first."""
        return self.gate.list_pending()
