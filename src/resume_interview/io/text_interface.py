"""
Text-based interview interface.

Provides a command-line interface for interviewing the persona built from
an uploaded document.
"""

from resume_interview.errors import CompletionFailed, InterviewError, SessionExpired
from resume_interview.io.document_loader import load_document
from resume_interview.orchestrator.interview_service import InterviewService

EXIT_COMMANDS = ("quit", "exit", "end")


class TextInterface:
    """
    Command-line text interface for interviews.

    Provides a simple REPL: the user plays the interviewer and the service
    answers as the document's subject.
    """

    def __init__(
        self,
        service: InterviewService,
        document_path: str | None = None,
    ) -> None:
        """
        Initialize the text interface.

        Args:
            service: Interview service to use.
            document_path: Resume file to load (prompts for pasted text if None).
        """
        self._service = service
        self._document_path = document_path

    async def run(self) -> None:
        """Run the interactive interview session."""
        print("\n" + "=" * 60)
        print("Resume Interview")
        print("=" * 60 + "\n")

        document = await self._get_document()
        if not document:
            print("No document provided. Nothing to interview.")
            return

        try:
            session_id = await self._service.start_session(document)
        except InterviewError as e:
            print(f"Could not start the interview: {e.message}")
            return

        print("\n" + "-" * 60)
        print(f"Session {session_id} started. Ask your questions ({'/'.join(EXIT_COMMANDS)} to stop).")
        print("-" * 60 + "\n")

        try:
            while True:
                question = await self._get_input("Interviewer: ")
                if question.strip().lower() in EXIT_COMMANDS:
                    break
                if not question.strip():
                    continue

                try:
                    answer = await self._service.ask_question(session_id, question)
                except CompletionFailed as e:
                    await self.send_message(f"[{e.message}]")
                    continue
                except SessionExpired as e:
                    await self.send_message(f"[{e.message}]")
                    break

                await self.send_message(f"Candidate: {answer}")
        finally:
            await self._service.end_session(session_id)
            print("\nInterview ended.")

    async def send_message(self, message: str) -> None:
        """
        Display a message to the terminal.

        Args:
            message: Message to display.
        """
        print(f"\n{message}\n")

    async def _get_input(self, prompt: str) -> str:
        # Using input() for simplicity; in production, could use aioconsole
        try:
            return input(prompt)
        except EOFError:
            return "exit"

    async def _get_document(self) -> str:
        """Load the document from the configured path or from pasted text."""
        if self._document_path:
            try:
                return load_document(self._document_path)
            except (OSError, ValueError) as e:
                print(f"Failed to load document: {e}")
                return ""

        print("Paste the resume text below.")
        print("Enter a blank line when done:\n")

        lines: list[str] = []
        while True:
            line = await self._get_input("")
            if line == "exit" or (not line.strip() and lines):
                break
            lines.append(line)
        return "\n".join(lines).strip()
