"""Built-in word lists used by the heuristics and the fallback spell checker."""

from __future__ import annotations

DEFAULT_ABBREVIATIONS = frozenset(
    {
        "mr.", "mrs.", "ms.", "dr.", "prof.", "sr.", "jr.", "st.", "mt.",
        "u.s.", "u.k.", "vs.", "etc.", "e.g.", "i.e.", "no.", "co.", "inc.",
        "fig.", "a.m.", "p.m.",
    }
)

DEFAULT_PROPER_NOUNS = frozenset(
    {
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
        "January", "February", "March", "April", "May", "June", "July", "August",
        "September", "October", "November", "December",
        "United", "States", "America", "USA",
        "Minnesota", "Oregon", "California", "Washington",
    }
)

# Forms of the pronoun "I" are always capitalized and never start a new sentence
# by themselves.
PRONOUN_I_FORMS = frozenset({"I", "I'm", "I've", "I'll", "I'd", "I’m", "I’ve", "I’ll", "I’d"})

DEFAULT_DICTIONARY = frozenset(
    {
        "a", "about", "after", "again", "against", "all", "almost", "also", "always",
        "am", "an", "and", "any", "apples", "are", "around", "as", "ask", "at", "away",
        "back", "be", "because", "been", "before", "being", "best", "better", "between",
        "big", "both", "but", "by",
        "call", "called", "came", "can", "cannot", "cared", "come", "could",
        "dark", "day", "did", "didn't", "different", "do", "does", "doesn't", "don't",
        "done", "down", "during",
        "each", "end", "ended", "enough", "even", "every", "example", "eye",
        "family", "far", "fast", "father", "feel", "few", "find", "first", "five", "for",
        "forest", "found", "four", "friend", "from", "further",
        "get", "give", "go", "good", "got", "great",
        "had", "hand", "has", "have", "he", "head", "hear", "heard", "help", "her",
        "here", "him", "his", "home", "house", "how",
        "i", "if", "in", "inside", "into", "is", "isn't", "it", "it's",
        "just",
        "keep", "kind", "known",
        "last", "later", "learn", "left", "let", "like", "little", "look",
        "made", "make", "many", "may", "me", "mean", "more", "most", "mother", "much", "my",
        "name", "need", "never", "new", "next", "night", "no", "nobody", "nor", "not", "now",
        "of", "off", "often", "old", "on", "once", "one", "only", "open", "or", "other",
        "our", "out", "over", "own",
        "part", "people", "place", "play", "put",
        "really", "right", "run",
        "said", "same", "saw", "say", "school", "see", "she", "should", "small", "so",
        "some", "something", "soon", "sound", "still", "stop", "story", "such",
        "take", "than", "that", "the", "their", "them", "then", "there", "these", "they",
        "thing", "think", "this", "those", "thought", "three", "through", "time", "to",
        "together", "too", "took", "trees", "two",
        "under", "until", "up", "us",
        "very",
        "want", "was", "watch", "water", "way", "we", "well", "well-known", "went", "were",
        "what", "when", "where", "which", "while", "who", "why", "will", "with", "word",
        "work", "would", "write", "wrote",
        "year", "yes", "you", "your",
    }
)
