import glob
import logging
import os
from typing import Dict, List

import pandas as pd

from .models import LearningSet, WordPair
from .stores import WordStore

logger = logging.getLogger("vocabquiz")

DUMMY_SET = "default_dummy"
DUMMY_WORDS = [
    ("Hund", "dog"),
    ("Katze", "cat"),
    ("Baum", "tree"),
    ("Haus", "house"),
    ("Wasser", "water"),
]


class VocabularyManager(WordStore):
    """Manages loading and accessing vocabulary sets."""

    def __init__(self, directory: str):
        self.directory = directory
        self.vocab_sets: Dict[str, List[WordPair]] = {}

    def load_all(self):
        self.vocab_sets = {}
        if not os.path.exists(self.directory):
            os.makedirs(self.directory)
            logger.warning(f"Created directory {self.directory}. Please add CSV files.")

        csv_files = glob.glob(os.path.join(self.directory, "*.csv"))
        for file_path in sorted(csv_files):
            set_id = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8", dtype=str)
            except Exception as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue
            if "word" not in df.columns or "translation" not in df.columns:
                logger.error(f"Skipping {set_id}: Missing columns.")
                continue
            words = self._to_word_pairs(set_id, df)
            self.vocab_sets[set_id] = words
            logger.info(f"Loaded {len(words)} words from {set_id}")

        if not self.vocab_sets:
            logger.warning("No CSV files found. Loading dummy data.")
            self.vocab_sets[DUMMY_SET] = [
                WordPair(id=f"{DUMMY_SET}-{i}", source_text=word, target_text=translation)
                for i, (word, translation) in enumerate(DUMMY_WORDS)
            ]

    @staticmethod
    def _to_word_pairs(set_id: str, df: pd.DataFrame) -> List[WordPair]:
        df = df.dropna(subset=["word", "translation"])
        df = df.assign(
            word=df["word"].astype(str).str.strip(),
            translation=df["translation"].astype(str).str.strip(),
        )
        df = df[(df["word"] != "") & (df["translation"] != "")]

        has_ids = "id" in df.columns
        words = []
        for index, row in df.iterrows():
            if has_ids and pd.notna(row["id"]):
                word_id = str(row["id"])
            else:
                word_id = f"{set_id}-{index}"
            words.append(
                WordPair(id=word_id, source_text=row["word"], target_text=row["translation"])
            )
        return words

    def has_set(self, set_id: str) -> bool:
        return set_id in self.vocab_sets

    def list_words(self, set_id: str) -> List[WordPair]:
        return list(self.vocab_sets.get(set_id, []))

    def get_sets(self) -> List[LearningSet]:
        sets = [
            LearningSet(id=key, name=key.replace("_", " ").title(), count=len(words))
            for key, words in self.vocab_sets.items()
        ]
        sets.sort(key=lambda x: x.name)
        return sets
