"""
Answer generation prompts.

Defines the grounded-answer system prompt, its mode and multi-topic
addenda, and the chat template carrying history, context and question.

Dependencies: langchain_core.prompts, langchain_core.messages
System role: Prompt templates for answer generation
"""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from knowledge_rag.models.retrieval import AnswerMode, ConversationTurn

SYSTEM_PROMPT = """You are a knowledge base assistant for an organization. You answer questions using only the organization's documents provided as context.

## Instructions
1. Use ONLY the provided context to answer. Do not use outside knowledge.
2. Cite every claim with the bracketed source number from the context, e.g. [1] or [2][3].
3. If the context does not contain enough information, say so clearly instead of guessing.
4. Use the conversation history to understand follow-up questions.

## Formatting
- Format answers in markdown.
- Use bullet points or numbered steps where they make the answer easier to follow.
- Keep the answer focused on the question."""

OPERATIONAL_MODE_INSTRUCTIONS = """## Operational Mode
The user needs to act on this answer right now.
- Be concise and action-oriented.
- Lead with the steps to take, in order.
- Skip background explanation unless it changes what the user should do."""

CROSS_TOPIC_INSTRUCTIONS = """## Multiple Topics
The context comes from several topics. Clearly indicate which topic each piece of information comes from."""

ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    MessagesPlaceholder("chat_history"),
    ("human", """Relevant information from the knowledge base:

{context}

Question: {question}"""),
])


def build_system_prompt(mode: AnswerMode = AnswerMode.NORMAL, multi_topic: bool = False) -> str:
    """
    Compose the system prompt for a request.

    Args:
        mode: Answer mode; operational appends concise-answer instructions
        multi_topic: Whether the context spans more than one topic

    Returns:
        str: System prompt text
    """
    sections = [SYSTEM_PROMPT]
    if mode == AnswerMode.OPERATIONAL:
        sections.append(OPERATIONAL_MODE_INSTRUCTIONS)
    if multi_topic:
        sections.append(CROSS_TOPIC_INSTRUCTIONS)
    return "\n\n".join(sections)


def history_to_messages(history: list[ConversationTurn] | None) -> list[BaseMessage]:
    """Convert prior turns to chat messages; unknown roles are skipped."""
    messages: list[BaseMessage] = []
    for turn in history or []:
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.content))
        elif turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
    return messages


def build_messages(
    context: str,
    question: str,
    history: list[ConversationTurn] | None = None,
) -> list[BaseMessage]:
    """Render history, context and question into chat messages."""
    return ANSWER_PROMPT.invoke({
        "chat_history": history_to_messages(history),
        "context": context,
        "question": question,
    }).to_messages()
