"""Поиск по опубликованным постам: индексация, планирование, ранжирование и пагинация"""
