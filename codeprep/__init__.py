"""CodePrep Hub - collaborative code-snippet workspace service."""
