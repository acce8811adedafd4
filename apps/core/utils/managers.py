from django.db import models


class CollegeQuerySet(models.QuerySet):
    def for_college(self, college):
        return self.filter(college=college)


class CollegeManager(models.Manager):
    def get_queryset(self):
        return CollegeQuerySet(self.model, using=self._db)

    def for_college(self, college):
        return self.get_queryset().for_college(college)
