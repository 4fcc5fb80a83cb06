"""
Dialogue script parser - compiles plain-text scripts to dialogue documents.

Supports a simple text-based format:

```
$npc_id = merchant

# introduction
Welcome to my shop!
! set_flag:met_merchant:true

>> Show me your wares -> shop [player.gold>=100]
>> Any news? -> rumors {add_global:reputation:1}
>> Goodbye

---

# rumors
They say the old mill is haunted.
-> introduction
```

`# id` opens a conversation, `>> text -> next [condition] {action}`
adds a choice (every part after the text is optional), `-> id` sets
the next conversation and `! action` lines are joined into the
conversation's entry action.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from narrative.errors import DataError

logger = logging.getLogger(__name__)


class DialogueScriptError(DataError, ValueError):
    """A dialogue script has a syntax error."""

    def __init__(self, message: str, line: int = 0):
        self.line = line
        super().__init__(f"line {line}: {message}" if line else message)


@dataclass
class ParsedChoice:
    """A parsed choice option."""
    text: str
    next: Optional[str] = None
    condition: Optional[str] = None
    action: Optional[str] = None


@dataclass
class ParsedConversation:
    """A parsed conversation node."""
    id: str
    text: str = ""
    next: Optional[str] = None
    choices: list[ParsedChoice] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)


@dataclass
class ParsedDialogue:
    """A complete parsed dialogue script."""
    npc_id: str
    conversations: list[ParsedConversation] = field(default_factory=list)


class DialogueParser:
    """
    Parses dialogue scripts from a simple text format.
    """

    # Regex patterns
    CONVERSATION_PATTERN = re.compile(r'^#\s*(\w+)\s*$')
    CHOICE_PATTERN = re.compile(
        r'^>>\s*(.+?)(?:\s*->\s*(\w+))?(?:\s*\[(.+?)\])?(?:\s*\{(.+?)\})?\s*$'
    )
    NEXT_PATTERN = re.compile(r'^->\s*(\w+)\s*$')
    ACTION_PATTERN = re.compile(r'^!\s*(.+)$')
    HEADER_PATTERN = re.compile(r'^\$(\w+)\s*=\s*(.+)$')

    def parse_file(self, path: str | Path) -> ParsedDialogue:
        """Parse a dialogue script file (the npc id defaults to the file name)."""
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_string(content, default_id=path.stem)

    def parse_string(self, content: str, default_id: str = "parsed") -> ParsedDialogue:
        """
        Parse a dialogue script string.

        Raises:
            DialogueScriptError: On a syntax error
        """
        dialogue = ParsedDialogue(npc_id=default_id)
        current: Optional[ParsedConversation] = None
        text_lines: list[str] = []
        seen: set[str] = set()

        def close() -> None:
            if current is not None:
                current.text = '\n'.join(text_lines).strip()
                dialogue.conversations.append(current)

        for number, raw in enumerate(content.split('\n'), start=1):
            line = raw.rstrip()
            stripped = line.strip()

            # Keep blank lines inside text
            if not stripped:
                if current and text_lines:
                    text_lines.append('')
                continue

            if stripped.startswith('//'):
                continue

            if stripped == '---':
                close()
                current = None
                text_lines = []
                continue

            match = self.CONVERSATION_PATTERN.match(stripped)
            if match:
                close()
                conversation_id = match.group(1)
                if conversation_id in seen:
                    raise DialogueScriptError(f"duplicate conversation '{conversation_id}'", number)
                seen.add(conversation_id)
                current = ParsedConversation(id=conversation_id)
                text_lines = []
                continue

            if current is None:
                match = self.HEADER_PATTERN.match(stripped)
                if match and match.group(1) in ('npc_id', 'id'):
                    dialogue.npc_id = match.group(2).strip()
                    continue
                raise DialogueScriptError(f"text outside a conversation: {stripped!r}", number)

            match = self.CHOICE_PATTERN.match(stripped)
            if match:
                text, next_id, condition, action = match.groups()
                current.choices.append(ParsedChoice(
                    text=text,
                    next=next_id,
                    condition=condition,
                    action=action,
                ))
                continue

            match = self.NEXT_PATTERN.match(stripped)
            if match:
                current.next = match.group(1)
                continue

            match = self.ACTION_PATTERN.match(stripped)
            if match:
                current.actions.append(match.group(1).strip())
                continue

            text_lines.append(line)

        close()

        for conversation in dialogue.conversations:
            if not conversation.text:
                raise DialogueScriptError(f"conversation '{conversation.id}' has no text")

        return dialogue

    def to_document(self, dialogue: ParsedDialogue) -> dict[str, Any]:
        """Convert a parsed dialogue to the dialogue document shape."""
        conversations: dict[str, Any] = {}
        for conversation in dialogue.conversations:
            data: dict[str, Any] = {'text': conversation.text}
            if conversation.actions:
                data['action'] = ';'.join(conversation.actions)
            if conversation.choices:
                data['choices'] = [
                    {
                        key: value
                        for key, value in (
                            ('text', choice.text),
                            ('condition', choice.condition),
                            ('action', choice.action),
                            ('next', choice.next),
                        )
                        if value is not None
                    }
                    for choice in conversation.choices
                ]
            if conversation.next:
                data['next'] = conversation.next
            conversations[conversation.id] = data

        return {'npc_id': dialogue.npc_id, 'conversations': conversations}

    def save_document(self, dialogue: ParsedDialogue, path: str | Path) -> None:
        """Save a parsed dialogue as YAML (.yaml/.yml) or JSON."""
        path = Path(path)
        document = self.to_document(dialogue)
        with open(path, 'w', encoding='utf-8') as f:
            if path.suffix == '.json':
                json.dump(document, f, indent=2, ensure_ascii=False)
            else:
                yaml.safe_dump(document, f, sort_keys=False, allow_unicode=True)


def decode_dialogue_script(text: str, document_id: str) -> dict[str, Any]:
    """Decoder for FileDocumentSource: `.dialogue` script -> document."""
    parser = DialogueParser()
    return parser.to_document(parser.parse_string(text, default_id=document_id))


SCRIPT_DECODERS = {'.dialogue': decode_dialogue_script}


def compile_dialogue_file(
    input_path: str | Path,
    output_path: Optional[str | Path] = None,
) -> Path:
    """
    Compile a dialogue script to a document file.

    Args:
        input_path: Path to a .dialogue file
        output_path: Output .yaml/.json path (default: same name with .yaml)

    Returns:
        The output path
    """
    input_path = Path(input_path)
    if output_path is None:
        output_path = input_path.with_suffix('.yaml')
    else:
        output_path = Path(output_path)

    parser = DialogueParser()
    dialogue = parser.parse_file(input_path)
    parser.save_document(dialogue, output_path)
    logger.info(f"Compiled {input_path} -> {output_path}")
    return output_path
