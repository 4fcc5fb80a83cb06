import sys
import logging
import argparse
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from runtime.core.config import RuntimeConfig, configure_logging
from runtime.resources.documents import FileDocumentSource, load_documents
from narrative.components.dialogue import DialogueTree
from narrative.dialogue.parser import SCRIPT_DECODERS
from narrative.dialogue.schema import DIALOGUE_SCHEMA


def verify(root: Path) -> int:
    """Validate every dialogue document under root; returns the failure count."""
    logger = logging.getLogger("DialogueVerification")
    source = FileDocumentSource(root, decoders=SCRIPT_DECODERS)

    logger.info(f"Loading dialogues from {root}...")
    valid, failures = load_documents(source, DIALOGUE_SCHEMA)

    for dialogue_id, data in valid.items():
        tree = DialogueTree.from_document(data)

        # Dangling next references end a dialogue early
        for conversation in tree.conversations.values():
            targets = [conversation.next] + [c.next for c in conversation.choices]
            for target in targets:
                if target and target not in tree:
                    logger.warning(
                        f"{dialogue_id}/{conversation.id}: next '{target}' does not exist"
                    )

        logger.info(f"OK {dialogue_id} ({len(tree.conversations)} conversations)")

    for dialogue_id, errors in failures.items():
        for error in errors:
            logger.error(f"{dialogue_id}: {error}")

    return len(failures)


def main():
    parser = argparse.ArgumentParser(description="Validate dialogue documents")
    parser.add_argument("path", nargs="?", help="Dialogue directory")
    parser.add_argument("--config", help="Runtime config file (.yaml/.json)")
    args = parser.parse_args()

    config = RuntimeConfig.from_file(args.config) if args.config else RuntimeConfig()
    configure_logging(config.log_level)
    logger = logging.getLogger("DialogueVerification")

    root = Path(args.path or config.dialogue_path)
    if not root.is_dir():
        logger.error(f"VERIFICATION FAILED: not a directory: {root}")
        sys.exit(1)

    failed = verify(root)
    if failed:
        logger.error(f"VERIFICATION FAILED: {failed} invalid dialogue(s)")
        sys.exit(1)

    logger.info("VERIFICATION SUCCESSFUL: All dialogues loaded and validated.")


if __name__ == "__main__":
    main()
