"""Built-in word lists, alert templates and swearing trivia.

Built-in words are immune to runtime removal.  Whitelist entries exempt a
whole message when any token matches one exactly.
"""

from __future__ import annotations

BUILTIN_WORDS: frozenset[str] = frozenset({
    "abeed",
    "arse",
    "ass",
    "asshole",
    "bastard",
    "bitch",
    "bollock",
    "bullock",
    "bullshit",
    "chink",
    "clit",
    "clitirus",
    "cock",
    "crap",
    "cum",
    "cunmy",
    "cunt",
    "damn",
    "dick",
    "dike",
    "douche",
    "douchebag",
    "dyke",
    "fag",
    "faggot",
    "fck",
    "fetish",
    "fuck",
    "fucking",
    "goddamn",
    "hell",
    "horseshit",
    "kys",
    "motherfucker",
    "orgasm",
    "peenar",
    "penis",
    "penus",
    "piss",
    "prick",
    "pussy",
    "retard",
    "shit",
    "slut",
    "sperm",
    "tf",
    "tranny",
    "twat",
    "vagina",
    "wanke",
    "whore",
    "wtf",
})

WHITELIST: frozenset[str] = frozenset({
    "assist",
    "assassin",
    "class",
    "pass",
    "assembly",
    "assign",
    "assumption",
    "mass",
    "bass",
    "grass",
    "brass",
    "hello",
})

RESPONSES: dict[str, list[str]] = {
    "single": [
        "You have the right to remain silent, {username}, especially if you're gonna curse.",
        "Dispatch, we've got a Code 5 on {username}: swearing in public.",
        "Ticket issued for verbal misconduct. Pay the jar, {username}.",
        "This is your profanity patrol speaking. Drop the swears and walk away, {username}.",
        "License and vocabulary, please. You're being pulled over for bad language, {username}.",
    ],
    "multiple": [
        "Whoa, {username}, that's a whole felony paragraph. {count} fines applied.",
        "{username}, you just dropped {count} swears in one message. That's a record, and a fine.",
        "{username}, that message broke the swear limit. {count} counts of verbal misconduct logged.",
        "{username}, you triggered the profanity multiplier: {count}x foul detected.",
        "{username}, you are now being fined for {count} separate infractions.",
    ],
}

FACTS: list[str] = [
    "Swearing has been shown to help people tolerate pain.",
    "Children typically learn their first swear word at age two.",
    "The average person swears about 80 to 90 times per day.",
    "Swear words are stored in a different part of the brain than other language.",
    "People who swear a lot are often more honest than those who don't.",
    "The most commonly used swear word in English is the F-word.",
    "Swearing increases when people are in emotional situations.",
    "People with larger vocabularies tend to have larger swearing vocabularies too.",
    "Swearing triggers the body's 'fight or flight' response.",
    "Swearing can build team bonding and solidarity in some workplaces.",
    "Swear words can make a story feel more intense and funnier.",
    "In many languages, swear words are among the first words non-native speakers learn.",
    "The brain processes swear words differently than it processes other language.",
    "Swear words often survive intact in people with certain kinds of brain damage.",
    "Taboo words grab more attention than non-taboo words.",
]
