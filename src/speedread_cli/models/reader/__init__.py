"""Speed-reading core: tokenizer, playback, sessions, dispatch and styling."""
