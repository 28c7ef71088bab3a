from datetime import date

from django.db import models, transaction

from core.models import CompanyScopedModel


class Pet(CompanyScopedModel):
    SPECIES_CHOICES = [
        ("dog", "Dog"),
        ("cat", "Cat"),
        ("bird", "Bird"),
        ("rabbit", "Rabbit"),
        ("hamster", "Hamster"),
        ("fish", "Fish"),
        ("reptile", "Reptile"),
        ("other", "Other"),
    ]
    GENDER_CHOICES = [
        ("male", "Male"),
        ("female", "Female"),
        ("unknown", "Unknown"),
    ]
    SIZE_CHOICES = [
        ("small", "Small"),
        ("medium", "Medium"),
        ("large", "Large"),
        ("extra_large", "Extra large"),
    ]

    client = models.ForeignKey("clients.Client", on_delete=models.CASCADE, related_name="pets")
    name = models.CharField(max_length=100)
    species = models.CharField(max_length=20, choices=SPECIES_CHOICES, default="dog")
    breed = models.CharField(max_length=100, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, default="unknown")
    birth_date = models.DateField(null=True, blank=True)
    weight = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    color = models.CharField(max_length=50, blank=True)
    size = models.CharField(max_length=20, choices=SIZE_CHOICES, default="medium")
    medical_history = models.TextField(blank=True)
    allergies = models.TextField(blank=True)
    medications = models.TextField(blank=True)
    veterinarian_contact = models.CharField(max_length=200, blank=True)
    temperament = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.get_species_display()})"

    def age_in_years(self, today=None):
        if not self.birth_date:
            return None
        today = today or date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return max(years, 0)


class PetPhoto(CompanyScopedModel):
    pet = models.ForeignKey(Pet, on_delete=models.CASCADE, related_name="photos")
    photo_url = models.URLField()
    caption = models.CharField(max_length=255, blank=True)
    is_profile_photo = models.BooleanField(default=False)

    class Meta:
        ordering = ["-is_profile_photo", "-created_at"]

    def __str__(self):
        return f"Photo of {self.pet.name}"

    def save(self, *args, **kwargs):
        # A pet has at most one profile photo
        with transaction.atomic():
            if self.is_profile_photo:
                PetPhoto.objects.filter(pet_id=self.pet_id, is_profile_photo=True).exclude(pk=self.pk).update(
                    is_profile_photo=False
                )
            super().save(*args, **kwargs)
