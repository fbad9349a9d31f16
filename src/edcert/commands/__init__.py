"""Click plumbing shared by the edcert command: base class and context."""
