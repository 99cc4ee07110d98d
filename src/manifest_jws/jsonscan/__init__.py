"""Pull JSON tokenizer and targeted field lookup."""
