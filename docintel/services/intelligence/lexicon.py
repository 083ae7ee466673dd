"""
Lookup tables used by the intelligence engines.

The tables are bundled into a frozen ``Lexicon`` that every engine takes as
constructor configuration. Substitution tables are ordered tuples of
``(find, replace)`` pairs so iteration order is fixed.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

Pairs = Tuple[Tuple[str, str], ...]
Words = Tuple[str, ...]


CONTRACTIONS: Pairs = (
    ("don't", "do not"),
    ("can't", "cannot"),
    ("won't", "will not"),
    ("isn't", "is not"),
    ("aren't", "are not"),
    ("wasn't", "was not"),
    ("weren't", "were not"),
    ("haven't", "have not"),
    ("hasn't", "has not"),
    ("hadn't", "had not"),
    ("wouldn't", "would not"),
    ("shouldn't", "should not"),
    ("couldn't", "could not"),
    ("mightn't", "might not"),
    ("mustn't", "must not"),
    ("it's", "it is"),
    ("that's", "that is"),
    ("there's", "there is"),
    ("here's", "here is"),
    ("what's", "what is"),
    ("where's", "where is"),
    ("who's", "who is"),
    ("why's", "why is"),
    ("how's", "how is"),
    ("let's", "let us"),
    ("i'm", "I am"),
    ("you're", "you are"),
    ("he's", "he is"),
    ("she's", "she is"),
    ("we're", "we are"),
    ("they're", "they are"),
    ("i've", "I have"),
    ("you've", "you have"),
    ("we've", "we have"),
    ("they've", "they have"),
    ("i'd", "I would"),
    ("you'd", "you would"),
    ("he'd", "he would"),
    ("she'd", "she would"),
    ("we'd", "we would"),
    ("they'd", "they would"),
    ("i'll", "I will"),
    ("you'll", "you will"),
    ("he'll", "he will"),
    ("she'll", "she will"),
    ("we'll", "we will"),
    ("they'll", "they will"),
)

INFORMAL_PHRASES: Pairs = (
    ("a lot of", "many"),
    ("a bunch of", "several"),
    ("kind of", "somewhat"),
    ("sort of", "somewhat"),
    ("pretty much", "essentially"),
    ("really", "very"),
    ("totally", "completely"),
    ("awesome", "excellent"),
    ("cool", "acceptable"),
    ("guy", "person"),
    ("stuff", "material"),
    ("thing", "item"),
    ("get", "obtain"),
    ("got", "received"),
    ("gotten", "obtained"),
    ("make sure", "ensure"),
    ("check out", "examine"),
    ("look at", "examine"),
    ("figure out", "determine"),
    ("find out", "discover"),
    ("set up", "establish"),
    ("put together", "assemble"),
)

ACADEMIC_VERBS: Pairs = (
    ("shows", "demonstrates"),
    ("tells", "indicates"),
    ("says", "states"),
    ("thinks", "posits"),
    ("believes", "contends"),
    ("looks at", "examines"),
    ("talks about", "discusses"),
    ("goes over", "reviews"),
    ("makes", "creates"),
    ("gets", "acquires"),
    ("puts", "places"),
    ("tries", "attempts"),
    ("starts", "initiates"),
    ("ends", "concludes"),
    ("helps", "facilitates"),
    ("uses", "utilizes"),
    ("changes", "modifies"),
    ("fixes", "rectifies"),
    ("breaks", "fractures"),
    ("builds", "constructs"),
)

PERSUASIVE_ADJECTIVES: Pairs = (
    ("good", "excellent"),
    ("bad", "unacceptable"),
    ("big", "substantial"),
    ("small", "limited"),
    ("fast", "rapid"),
    ("slow", "gradual"),
    ("easy", "straightforward"),
    ("hard", "challenging"),
    ("simple", "elegant"),
    ("complex", "sophisticated"),
)

PLAIN_WORDS: Pairs = (
    ("utilize", "use"),
    ("facilitate", "help"),
    ("implement", "carry out"),
    ("methodology", "method"),
    ("paradigm", "model"),
    ("leverage", "use"),
    ("synergy", "cooperation"),
    ("optimize", "improve"),
    ("streamline", "simplify"),
    ("enhance", "improve"),
    ("elucidate", "explain"),
    ("ascertain", "find out"),
    ("commence", "begin"),
    ("terminate", "end"),
    ("endeavor", "try"),
    ("subsequent", "later"),
    ("prior", "earlier"),
    ("approximately", "about"),
    ("consequently", "so"),
    ("nevertheless", "however"),
)


def _reverse(pairs: Pairs) -> Pairs:
    # "i'm" -> "I am" reverses to "I am" -> "I'm"
    return tuple(
        (expansion, "I" + contraction[1:] if contraction.startswith("i'") else contraction)
        for contraction, expansion in pairs
    )


@dataclass(frozen=True)
class Lexicon:
    """Immutable marker lists, substitution maps and canonical orderings."""

    # Formality and emotion
    formal_indicators: Words = (
        "therefore", "however", "moreover", "consequently", "thus", "furthermore",
        "nevertheless", "hence", "wherein", "heretofore", "aforementioned",
    )
    informal_indicators: Words = (
        "like", "just", "really", "totally", "awesome", "cool", "guy", "stuff",
        "thing", "get", "got", "gotten", "make sure", "check out", "figure out",
    )
    positive_words: Words = (
        "good", "great", "excellent", "wonderful", "fantastic", "amazing",
        "positive", "beneficial", "advantageous", "successful", "happy", "joyful",
    )
    negative_words: Words = (
        "bad", "poor", "terrible", "awful", "horrible", "negative",
        "detrimental", "harmful", "unsuccessful", "failed", "sad", "unhappy",
    )

    # Tone markers
    academic_markers: Words = (
        "hypothesis", "methodology", "analysis", "conclusion", "evidence", "research",
    )
    persuasive_markers: Words = (
        "should", "must", "need to", "essential", "critical", "important", "recommend",
    )
    conversational_markers: Words = ("you know", "I mean", "actually", "basically")
    secondary_tone_indicators: Tuple[Tuple[str, Words], ...] = (
        ("formal", ("therefore", "however", "moreover", "consequently")),
        ("informal", ("like", "just", "really", "totally")),
        ("academic", ("hypothesis", "methodology", "analysis", "conclusion")),
        ("persuasive", ("should", "must", "need to", "essential")),
        ("descriptive", ("described", "characterized", "depicted", "portrayed")),
        ("instructive", ("first", "then", "next", "finally", "step")),
        ("analytical", ("because", "since", "therefore", "thus", "consequently")),
        ("critical", ("however", "although", "despite", "nevertheless")),
    )
    tone_ordinals: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({
        "informal": 0,
        "conversational": 1,
        "persuasive": 2,
        "neutral": 3,
        "academic": 4,
        "formal": 5,
    }))
    tone_adjustments: Mapping[Tuple[str, str], Pairs] = field(default_factory=lambda: MappingProxyType({
        ("formal", "informal"): (
            ("therefore", "so"), ("however", "but"), ("moreover", "also"),
            ("consequently", "so"), ("thus", "so"),
        ),
        ("informal", "formal"): (
            ("so", "therefore"), ("but", "however"), ("also", "moreover"),
            ("get", "obtain"), ("stuff", "material"),
        ),
        ("neutral", "persuasive"): (
            ("can", "should"), ("may", "must"), ("could", "will"),
        ),
    }))

    # Quick document-level tone classification
    quick_formal_words: Words = ("therefore", "however", "moreover", "furthermore", "consequently")
    quick_informal_words: Words = ("like", "just", "really", "totally", "awesome")
    quick_academic_words: Words = ("hypothesis", "methodology", "analysis", "conclusion", "evidence")

    # Summary tone classification
    summary_formal_words: Words = ("therefore", "however", "moreover", "consequently", "thus", "furthermore")
    summary_informal_words: Words = ("like", "just", "really", "totally", "awesome", "cool")
    summary_academic_words: Words = ("hypothesis", "methodology", "analysis", "conclusion", "evidence")
    summary_persuasive_words: Words = ("should", "must", "need to", "essential", "critical", "important")

    # Consistency
    style_formal_words: Words = ("therefore", "however", "moreover", "consequently", "thus")
    style_informal_words: Words = ("like", "just", "really", "totally", "awesome")
    term_suffix_pattern: str = r"(ing|ed|s|es|ly|ment|ness|ity|tion|sion)$"
    strong_verbs: Words = ("is", "are", "was", "were", "has", "have", "shows", "indicates", "demonstrates")
    negation_words: Words = ("not", "never", "no", "none", "nothing", "nowhere")
    months: Words = (
        "january", "february", "march", "april", "may", "june", "july",
        "august", "september", "october", "november", "december",
    )
    measurement_units: Words = ("%", "kg", "m", "cm", "mm", "km", "g", "mg", "ml", "l", "°C", "°F", "USD", "£", "€")

    # Structure and flow
    stop_words: Words = (
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "being",
    )
    logical_progressions: Tuple[Tuple[str, str], ...] = (
        ("introduction", "background"),
        ("background", "methodology"),
        ("methodology", "analysis"),
        ("analysis", "results"),
        ("results", "discussion"),
        ("discussion", "conclusion"),
        ("problem", "solution"),
        ("cause", "effect"),
        ("theory", "application"),
    )
    logical_indicators: Words = ("therefore", "thus", "consequently", "as a result", "leading to")
    transitional_phrases: Words = (
        "in conclusion", "to summarize", "therefore", "thus", "consequently",
        "as a result", "in addition", "furthermore", "moreover", "however",
        "on the other hand", "in contrast", "similarly", "likewise",
    )
    expected_sections: Words = ("introduction", "methodology", "results", "discussion", "conclusion")
    canonical_order: Tuple[Tuple[int, Words], ...] = (
        (10, ("introduction", "abstract", "executive")),
        (20, ("background", "literature", "related")),
        (30, ("method", "approach", "design")),
        (40, ("analysis", "results", "findings")),
        (50, ("discussion", "interpretation")),
        (60, ("conclusion", "summary", "recommendation")),
        (70, ("appendix", "reference", "bibliography")),
    )

    # Section title keywords
    introduction_titles: Words = ("introduction", "overview", "abstract")
    conclusion_titles: Words = ("conclusion", "summary", "recommendation")
    summary_expected_titles: Words = ("executive", "summary", "conclusion")
    open_titles: Words = ("introduction", "background")
    analytical_titles: Words = ("method", "analysis", "results")
    finding_titles: Words = ("conclusion", "summary", "findings")
    recommendation_titles: Words = ("recommendation", "suggestion", "action", "next steps")
    theme_stop_words: Words = ("which", "there", "their", "about", "would", "could", "should")

    # Summaries
    conclusion_markers: Words = ("therefore", "thus", "consequently", "in conclusion", "in summary", "overall")
    importance_markers: Words = ("important", "key", "critical", "essential", "significant", "major")
    detail_sentence_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({
        "brief": 3,
        "standard": 5,
        "detailed": 8,
        "comprehensive": 12,
    }))
    # Applied in order, so a phrase must precede any phrase it contains
    filler_phrases: Words = (
        "it is important to note that", "it should be noted that", "due to the fact that",
        "as a matter of fact", "at this point in time", "in the event that",
        "the fact that", "in order to",
    )
    redundant_phrases: Words = (
        "basic fundamentals", "end result", "future plans",
        "past history", "true facts", "unexpected surprise",
    )
    continuity_sentence: str = "Additional details support these key points."

    # Rewrites
    contractions: Pairs = CONTRACTIONS
    informal_phrases: Pairs = INFORMAL_PHRASES
    expansions: Pairs = _reverse(CONTRACTIONS)
    academic_verbs: Pairs = ACADEMIC_VERBS
    persuasive_adjectives: Pairs = PERSUASIVE_ADJECTIVES
    plain_words: Pairs = PLAIN_WORDS


DEFAULT_LEXICON = Lexicon()
